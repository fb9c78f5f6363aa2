"""
Test Fixtures - Shared Test Data and Configurations.

    - sample_config.yaml: Sample pipeline configuration
"""
