#!/usr/bin/env python3
"""
markline - command line entry point

Usage:
    markline transform <markdown_file> [--plugins plugins.json] [--output out.md]
    markline validate <plugins.json>
    markline list <plugins.json>
    markline serve [--host 127.0.0.1] [--port 5000]
"""

import argparse
import logging
import sys
from pathlib import Path

from markline.plugins.errors import PluginLoadError
from markline.plugins.loader import create_manager, load_plugins_file


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def cmd_transform(args):
    """Transform a markdown file with the configured plugins."""
    markdown_file = Path(args.markdown_file)

    if not markdown_file.exists():
        print(f"Error: File not found: {markdown_file}", file=sys.stderr)
        sys.exit(1)

    manager = create_manager(
        plugins_file=args.plugins,
        skip_invalid=True if args.skip_invalid else None,
        debug=True if args.debug else None
    )

    with open(markdown_file, 'r', encoding='utf-8') as f:
        text = f.read()

    result = manager.transform(text)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(result.output)
        print(f"✅ Wrote {result.line_count} line(s) to {output_path}", file=sys.stderr)
    else:
        sys.stdout.write(result.output)

    if result.errors:
        print(f"\n⚠️  {len(result.errors)} error(s):", file=sys.stderr)
        for error in result.errors:
            print(f"  {error}", file=sys.stderr)
        sys.exit(1)


def cmd_validate(args):
    """Check that a plugin definitions file loads."""
    try:
        plugins = load_plugins_file(args.plugins_file)
    except PluginLoadError as e:
        print(f"❌ Invalid plugin definitions: {e}")
        sys.exit(1)

    function_count = sum(len(plugin.line_functions) for plugin in plugins)
    print(f"✅ {len(plugins)} plugin(s), {function_count} line function(s) loaded from {args.plugins_file}")


def cmd_list(args):
    """List plugins and their line functions."""
    plugins = load_plugins_file(args.plugins_file, skip_invalid=args.skip_invalid)

    if not plugins:
        print("No plugins found.")
        return

    print(f"\nFound {len(plugins)} plugin(s):\n")
    print(f"{'Plugin':<20} {'Function':<20} {'Effects':<8} {'Pattern'}")
    print("=" * 70)

    for plugin in plugins:
        for function in plugin.line_functions:
            pattern = function.pattern if function.pattern is not None else '(every line)'
            print(f"{plugin.name:<20} {function.name:<20} {len(function.effects):<8} {pattern}")


def cmd_serve(args):
    """Run the Flask API (development server)."""
    from markline.api import app

    app.run(debug=args.debug, host=args.host, port=args.port)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="markline - declarative line transformations for markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  markline transform notes.md --plugins plugins.json
  markline transform notes.md --debug --output notes.html
  markline validate plugins.json
  markline list plugins.json
  markline serve --port 5000
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Transform command
    transform_parser = subparsers.add_parser('transform', help='Transform a markdown file')
    transform_parser.add_argument('markdown_file', help='Markdown file to transform')
    transform_parser.add_argument('--plugins', default=None,
                                  help='Plugin definitions file (default: MARKLINE_PLUGINS_FILE)')
    transform_parser.add_argument('--output', default=None, help='Output file (default: stdout)')
    transform_parser.add_argument('--skip-invalid', action='store_true',
                                  help='Skip invalid line functions instead of failing their plugin')
    transform_parser.add_argument('--debug', action='store_true',
                                  help='Debug logging; built-in plugins when no plugins file is set')

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate plugin definitions')
    validate_parser.add_argument('plugins_file', help='Plugin definitions file')

    # List command
    list_parser = subparsers.add_parser('list', help='List plugins and line functions')
    list_parser.add_argument('plugins_file', help='Plugin definitions file')
    list_parser.add_argument('--skip-invalid', action='store_true', help='Skip invalid line functions')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Run the HTTP API')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Bind address (default: 127.0.0.1)')
    serve_parser.add_argument('--port', type=int, default=5000, help='Port (default: 5000)')
    serve_parser.add_argument('--debug', action='store_true', help='Flask debug mode')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(debug=getattr(args, 'debug', False))

    command_handlers = {
        'transform': cmd_transform,
        'validate': cmd_validate,
        'list': cmd_list,
        'serve': cmd_serve,
    }

    try:
        command_handlers[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
