"""Run the API server: `python -m habittracker`."""

from habittracker.main import run

if __name__ == "__main__":
    run()
