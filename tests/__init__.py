"""Test suite for the searchcomponents library.

The test suite is organized into the following modules:
- tests/test_dates.py, tests/test_fields.py: Date parsing and the field registry
- tests/test_normalizer.py, tests/test_documents.py: Record normalization
- tests/test_hod.py, tests/test_idol.py: Backend documents services
- tests/test_namespaces.py: Domain resolution
- tests/test_parametric.py: Parametric values, statistics and buckets
- tests/test_config.py: YAML configuration
- tests/utils: Logging and framework document conversion
"""
