import argparse
import logging
import sys

from .config import ConfigError, load_settings
from .project import ProjectFileError, load_project
from .layout import build_scene
from .validator import validate_layout
from .exporter import export_configuration

logger = logging.getLogger("desk_core")


def cmd_layout(args, settings):
    config = load_project(args.project)
    scene = build_scene(config)
    for issue in validate_layout(config):
        print(f"[{issue.severity.upper()}] {issue.message}", file=sys.stderr)
    print(scene.model_dump_json(indent=2))
    return 0


def cmd_export(args, settings):
    config = load_project(args.project)
    out = args.output or f"desk_project.{settings.export_format}"
    export_configuration(config, out, include_room=not args.no_room)
    print(f"Exported {out}")
    return 0


def cmd_guide(args, settings):
    # Imported lazily: the advisor pulls in the Gemini client
    from .advisor import DesignAdvisor, AdvisorNotConfigured

    config = load_project(args.project)
    try:
        advisor = DesignAdvisor(settings)
    except AdvisorNotConfigured as e:
        print(str(e), file=sys.stderr)
        return 2

    guide = advisor.generate_build_guide(config)
    if guide is None:
        print("Could not generate build guide", file=sys.stderr)
        return 1

    print("Cut list:")
    for item in guide.cut_list:
        print(f"  {item.quantity} x {item.part_name} ({item.dimensions}) {item.material}")
    print("Tools: " + ", ".join(guide.tools_required))
    for i, step in enumerate(guide.steps, 1):
        print(f"{i}. {step.title}\n   {step.description}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Built-in desk configurator")
    parser.add_argument("--config", help="Path to settings YAML")
    sub = parser.add_subparsers(dest="command", required=True)

    p_layout = sub.add_parser("layout", help="Print the scene graph of a project")
    p_layout.add_argument("project", help="Path to desk_project.json")
    p_layout.set_defaults(func=cmd_layout)

    p_export = sub.add_parser("export", help="Write the desk (and room) to GLB/OBJ")
    p_export.add_argument("project")
    p_export.add_argument("output", nargs="?")
    p_export.add_argument("--no-room", action="store_true", help="Desk only, no walls/floor")
    p_export.set_defaults(func=cmd_export)

    p_guide = sub.add_parser("guide", help="Ask the AI for a cut list and build steps")
    p_guide.add_argument("project")
    p_guide.set_defaults(func=cmd_guide)

    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    try:
        return args.func(args, settings)
    except ProjectFileError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
