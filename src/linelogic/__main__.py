"""Allows `python -m linelogic`."""
from linelogic.main import main

if __name__ == "__main__":
    main()
