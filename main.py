# main.py
import logging

from core.config import LOG_LEVEL
from gui.merger_gui import MergerGUI


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")

    # Create and launch the GUI
    app = MergerGUI()
    app.run()

if __name__ == "__main__":
    main()
