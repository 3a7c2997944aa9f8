# Spreader Detector
"""
Spreader Detector
Infection-probability propagation along a contact chain, with triage report.

Project Structure:
    spreader_detector/
    ├── common/      - Error hierarchy and diagnostics
    ├── data/        - BLOCK 1: People registry and dataset loading
    ├── models/      - BLOCK 2: Infection propagation over meetings
    ├── decision/    - BLOCK 3: Triage categories and report rendering
    ├── pipeline.py  - Load -> propagate -> rank -> report
    ├── config.py    - YAML configuration
    └── cli.py       - Command-line entry point
"""

__version__ = "0.1.0"
__author__ = "Spreader Detector Team"
