"""
FareSplitLedger GUI
- Record each day's gross earnings, CNG cost, online payments and driver pass for a shared vehicle.
- Settle every day between owner and driver and summarize any period; export CSV/Excel.

Run:
  python fare_split_gui.py

Dependencies:
  pip install openpyxl
(Tkinter ships with most Python distributions; on some Linux you may need: sudo apt-get install python3-tk)
"""
from __future__ import annotations

try:
    import tkinter as tk
except ModuleNotFoundError:
    tk = None

from log_setup import setup_logging


def main():
    """Main entry point for the application"""
    if tk is None:
        raise RuntimeError(
            'tkinter is not available. Install it (e.g., on Ubuntu: sudo apt-get install python3-tk) '
            'and re-run to use the GUI.'
        )

    setup_logging()
    from main_app import FareSplitApp

    root = tk.Tk()
    FareSplitApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
