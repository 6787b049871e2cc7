"""Settings package for the court booking project.

`base.py` holds the configuration shared by every environment; `dev.py`,
`test.py` and `prod.py` extend it with environment specific overrides.
"""
