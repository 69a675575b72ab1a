"""
Entry point for the study-engine CLI from a source checkout.

Run with:
    python main.py plan plan.json
    python main.py --help
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from study_engine.cli.main import run

if __name__ == "__main__":
    run()
