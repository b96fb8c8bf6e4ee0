import argparse
import json
import logging
from typing import Any, Optional

from layerpaint import Engine
from layerpaint.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 200


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="layerpaint command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render", help="Replay paint commands and save the frame as PNG"
    )
    render_parser.add_argument(
        "strokes_file",
        help="JSON list of commands, or an object with 'commands' and optional "
        "'width', 'height' and 'effects'",
    )
    render_parser.add_argument("output_file", help="Output image file")
    render_parser.add_argument("--width", type=int, help="Canvas width")
    render_parser.add_argument("--height", type=int, help="Canvas height")
    render_parser.add_argument("--background", help="Initial background image")
    render_parser.add_argument(
        "--export",
        action="store_true",
        help="Save the background+foreground snapshot instead of the frame",
    )

    return parser.parse_args(argv)


def load_document(path: str) -> dict[str, Any]:
    """Read a strokes file into a dict with a ``commands`` list."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {"commands": data}
    if not isinstance(data, dict) or not isinstance(data.get("commands", []), list):
        raise ValueError("Expected a list of commands in %s" % path)
    return data


def replay(engine: Engine, commands: list) -> int:
    """Apply commands in order. Returns the number of commands applied."""
    handlers = {
        "paint": engine.paint,
        "erase": engine.erase,
        "interactive": engine.set_interactive,
    }
    count = 0
    for index, command in enumerate(commands):
        if not isinstance(command, dict):
            logger.warning("Skipping command %d: not an object" % index)
            continue
        kwargs = dict(command)
        op = kwargs.pop("op", "paint")
        handler = handlers.get(op)
        if handler is None:
            logger.warning("Skipping command %d: unknown op %r" % (index, op))
            continue
        try:
            handler(**kwargs)
        except TypeError as e:
            logger.warning("Skipping command %d: %s" % (index, e))
            continue
        count += 1
    return count


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("layerpaint").setLevel(logging.DEBUG)
    else:
        logging.getLogger("layerpaint").setLevel(logging.INFO)

    if args.command == "render":
        try:
            document = load_document(args.strokes_file)
        except (OSError, ValueError) as e:
            logger.error("Failed to read %s: %s" % (args.strokes_file, e))
            return 1

        width = args.width or document.get("width", DEFAULT_SIZE)
        height = args.height or document.get("height", DEFAULT_SIZE)
        try:
            engine = Engine(
                width,
                height,
                initial_image=args.background,
                effects=document.get("effects"),
            )
        except (TypeError, ValueError) as e:
            logger.error(str(e))
            return 1

        with engine:
            count = replay(engine, document.get("commands", []))
            engine.set_interactive(False)
            logger.info("Applied %d commands" % count)
            if args.export:
                with open(args.output_file, "wb") as f:
                    f.write(engine.export())
            else:
                engine.topil().save(args.output_file)

    return None


if __name__ == "__main__":
    main()
