"""
Root entry point for the Journal Insights report.
Bootstraps the moodlens package and runs the report command.
"""

import sys
import os

# Ensure the project root is in python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from moodlens.main import main

if __name__ == "__main__":
    sys.exit(main())
