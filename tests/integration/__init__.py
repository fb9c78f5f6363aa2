"""
Integration Tests - Pipelines Run End to End.

Test Files:
    - test_pipeline_run.py: Run loop, strategies, metrics
    - test_etl_runner.py: Three-stage ETL runner
"""
