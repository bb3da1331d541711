"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) objects and starts
the Qt Event Loop.

It acts as the "Dependency Injection" root:
1. Sets up logging.
2. Instantiates the circuit model (CircuitState).
3. Instantiates the Main Window, which builds the controllers around it.
"""
import logging
import sys
from typing import Optional

from linelogic.application import create_app
from linelogic.logging_config import setup_logging
from linelogic.model.state import CircuitState
from linelogic.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def main(log_level: Optional[int] = None) -> None:
    # 1. Setup Logging (Console, level from argument or LINELOGIC_LOG_LEVEL)
    setup_logging(level=log_level)

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the Data Model
    state = CircuitState()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(state)
    window.show()
    logger.info(f"Editor ready with a {state.width} x {state.height} grid.")

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
