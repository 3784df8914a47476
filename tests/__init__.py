"""
Test Suite for Endpoint Discovery
=================================

Test Structure:
    - test_paths.py: folder walk order and file name conventions
    - test_hyperlambda.py: Hyperlambda loader
    - test_metadata.py: arguments, authorization and description
    - test_crud.py: CRUD / SQL classification
    - test_scanner.py: end-to-end discovery
    - test_config.py: configuration loading
    - test_cli.py: command line entry point
"""
