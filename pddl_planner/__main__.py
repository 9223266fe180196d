import sys

from pddl_planner.cli import main


if __name__ == "__main__":
    sys.exit(main())
