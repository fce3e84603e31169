import sys

from weather_recorder.cli import main

if __name__ == "__main__":
    sys.exit(main())
