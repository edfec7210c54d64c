import argparse
import logging
import os
import sys

from catna.narrative import FORMATS, render


def log_dir() -> str:
    return os.environ.get("CATNA_LOG_DIR", os.path.join(os.path.expanduser("~"), ".catna", "logs"))


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="catna", description="Render the explicit vs implicit missingness write-up")
    parser.add_argument("--format", choices=FORMATS, default="markdown", help="Output format")
    parser.add_argument("--output", "-o", help="Write to this file instead of stdout")
    parser.add_argument("--na-label", help="Label used when converting missing values to a level")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log file verbosity")
    args = parser.parse_args(argv)

    directory = log_dir()
    os.makedirs(directory, exist_ok=True)
    logging.basicConfig(
        filename=os.path.join(directory, "catna.log"),
        level=getattr(logging, args.log_level),
        format="%(asctime)s pid=%(process)d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log = logging.getLogger("catna.cli")

    log.info("Rendering write-up format=%s output=%s", args.format, args.output or "<stdout>")
    document = render(args.format, na_label=args.na_label)

    if args.output:
        with open(args.output, "w") as f:
            f.write(document)
        log.info("Wrote %d characters to %s", len(document), args.output)
    else:
        sys.stdout.write(document)
    return 0


if __name__ == "__main__":
    sys.exit(main())
