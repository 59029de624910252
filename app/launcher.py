"""Console entry point: `flow-sight` runs the Streamlit app."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from streamlit.web import cli as stcli

APP_PATH = Path(__file__).resolve().parent / "streamlit_app.py"


def build_argv(extra: Optional[List[str]] = None) -> List[str]:
    return ["streamlit", "run", str(APP_PATH), *(extra or [])]


def main() -> None:
    sys.argv = build_argv(sys.argv[1:])
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
