import sys
import traceback


def main() -> None:
    try:
        from pddl_planner.cli import main as cli_main

        sys.exit(cli_main(sys.argv[1:]))
    except SystemExit:
        raise
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr, flush=True)
        sys.exit(130)
    except BaseException as error:
        print("pddl-planner crashed.", file=sys.stderr, flush=True)
        traceback.print_exception(
            type(error), error, error.__traceback__, file=sys.stderr
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
