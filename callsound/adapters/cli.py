"""
CLI Adapter - Command-line access to the profile archive.

Thin wrapper over ProfileArchive for operators managing the
server-side profiles directory.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="callsound",
        description="Voice-triggered soundboard profile tools",
    )
    parser.add_argument(
        "--profiles-dir",
        help="Profile archive directory (default: $CALLSOUND_PROFILES_DIR or ./server-profiles)",
    )
    parser.add_argument(
        "--events",
        action="store_true",
        help="Write structured JSON events to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    profiles_parser = subparsers.add_parser("profiles", help="Manage archived profiles")
    profile_commands = profiles_parser.add_subparsers(dest="profiles_command")

    profile_commands.add_parser("list", help="List archived profiles")

    show_parser = profile_commands.add_parser("show", help="Summarize an archived profile")
    show_parser.add_argument("name", help="Profile name")

    add_parser = profile_commands.add_parser("add", help="Validate a profile file and archive it")
    add_parser.add_argument("file", help="Path to an exported profile JSON file")
    add_parser.add_argument("--name", help="Archive name (default: file name without extension)")
    add_parser.add_argument("--read-only", action="store_true", help="Protect against overwrite and delete")

    delete_parser = profile_commands.add_parser("delete", help="Delete an archived profile")
    delete_parser.add_argument("name", help="Profile name")

    subparsers.add_parser("version", help="Show version")

    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    if parsed.command == "version":
        from callsound import __version__
        print(f"callsound {__version__}")
        return 0

    if parsed.command == "profiles":
        if parsed.profiles_command is None:
            profiles_parser.print_help()
            return 0
        archive = _open_archive(parsed)
        if parsed.profiles_command == "list":
            return _cmd_list(archive)
        if parsed.profiles_command == "show":
            return _cmd_show(archive, parsed.name)
        if parsed.profiles_command == "add":
            return _cmd_add(archive, parsed)
        if parsed.profiles_command == "delete":
            return _cmd_delete(archive, parsed.name)

    return 1


def _open_archive(args: argparse.Namespace):
    from callsound.config import StoreConfig
    from callsound.monitoring import configure_logging
    from callsound.profiles import ProfileArchive

    config = StoreConfig(create_dirs=False)
    directory = Path(args.profiles_dir) if args.profiles_dir else config.profiles_dir

    events = configure_logging() if args.events else None
    return ProfileArchive(directory, max_profile_bytes=config.max_profile_bytes, events=events)


def _cmd_list(archive) -> int:
    """List archived profiles."""
    entries = archive.list()
    if not entries:
        print("No profiles archived.")
        return 0

    for entry in entries:
        flags = []
        if entry.read_only:
            flags.append("read-only")
        if entry.corrupt:
            flags.append("unreadable")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        saved = entry.saved_at or "-"
        print(f"  {entry.name:30} {saved}{suffix}")
    return 0


def _cmd_show(archive, name: str) -> int:
    """Summarize an archived profile."""
    from callsound.errors import ProfileFormatError
    from callsound.profiles import validate_profile

    result = archive.load(name)
    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    try:
        profile = validate_profile(result.document)
    except ProfileFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Profile: {name}")
    print(f"  Version: {profile.version}")
    print(f"  Read-only: {bool(result.document.get('readOnly'))}")
    print(f"  Saved: {result.document.get('savedAt', '-')}")
    print()
    print(f"  Sound clips ({len(profile.sound_clips)}):")
    for clip in profile.sound_clips:
        print(f"    {clip.name:25} {clip.format:6} {clip.duration:6.2f}s {clip.size:>10} bytes")
    print()
    print(f"  Trigger words ({len(profile.trigger_words)}):")
    for trigger in profile.trigger_words:
        state = "" if trigger.enabled else " (disabled)"
        print(f"    {trigger.phrase!r} -> {', '.join(trigger.sound_clip_names)}{state}")
    print()
    settings = profile.settings
    print(f"  Default responses: {'on' if settings.default_response_enabled else 'off'}"
          f" ({settings.default_response_delay}ms delay)")
    for clip_name in settings.default_response_sound_clip_names:
        print(f"    {clip_name}")
    return 0


def _cmd_add(archive, args: argparse.Namespace) -> int:
    """Validate a profile file and archive it."""
    from callsound.errors import ProfileFormatError
    from callsound.profiles import strip_envelope, validate_profile

    path = Path(args.file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        validate_profile(data)
    except (OSError, json.JSONDecodeError, ProfileFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    name = args.name or path.stem
    result = archive.save(strip_envelope(data), name, read_only=args.read_only)
    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    print(f"Saved {name} to {archive.path_for(name)}")
    return 0


def _cmd_delete(archive, name: str) -> int:
    """Delete an archived profile."""
    result = archive.delete(name)
    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    print(f"Deleted {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
