# SPDX-License-Identifier: MIT
"""Command-line interface for qautogen.

A target is described in a TOML file:

    name = "app"
    sources = ["main.cpp", "window.h", "window.ui", "res.qrc"]
    dependencies = ["core"]

    [properties]
    AUTOMOC = true
    AUTOUIC = true
    AUTORCC = true

    [config_properties.Debug]
    COMPILE_DEFINITIONS = ["DEBUG"]

    [[files]]
    path = "legacy.h"
    properties = { SKIP_AUTOMOC = true }

    [build]
    configs = ["Debug", "Release"]
    global_autogen_target = true
    dual_need_policy = "both"     # or "conflict" (default), "prefer_moc"

    [qt]
    version = "5.15"
    tools = { moc = "/opt/qt/bin/moc" }

Relative paths are taken from the directory of the TOML file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib  # type: ignore[no-redef]

from qautogen.configure.config import Configure
from qautogen.core.classifier import DualNeedPolicy
from qautogen.core.config import BuildConfigs, QtVersion
from qautogen.core.errors import AutogenError
from qautogen.core.graph import RecordingBuildGraph
from qautogen.core.initializer import AutogenInitializer, InitializerOptions
from qautogen.core.target import Target
from qautogen.generators.generator import is_stale
from qautogen.tools.toolchain import QtToolchain

# Set up logging
logger = logging.getLogger("qautogen")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def load_description(path: Path) -> dict[str, Any]:
    """Read a TOML target description.

    Raises:
        AutogenError: If the file cannot be read or parsed.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise AutogenError(f"cannot read target description: {e.strerror}", str(path)) from e
    except tomllib.TOMLDecodeError as e:
        raise AutogenError(f"invalid target description: {e}", str(path)) from e
    if not isinstance(data.get("name"), str) or not data["name"]:
        raise AutogenError("target description has no 'name'", str(path))
    return data


def build_target(
    data: dict[str, Any],
    base_dir: Path,
    build_dir: Path,
    overrides: dict[str, str] | None = None,
) -> Target:
    """Create the Target described by data.

    Args:
        data: Parsed target description.
        base_dir: Directory relative paths are resolved against.
        build_dir: Build directory of the target.
        overrides: Target properties set on the command line.

    Raises:
        AutogenError: If a [[files]] entry has no path.
    """
    source_dir = base_dir / data.get("source_dir", ".")
    target = Target(
        data["name"],
        source_dir=source_dir,
        binary_dir=build_dir,
        properties=data.get("properties", {}),
    )
    target.properties.update(overrides or {})
    for config, props in data.get("config_properties", {}).items():
        target.config_properties[config] = dict(props)

    target.add_sources(list(data.get("sources", [])))
    for entry in data.get("files", []):
        if not isinstance(entry, dict) or not entry.get("path"):
            raise AutogenError(f"[[files]] entry has no 'path': {entry!r}", data["name"])
        target.add_source(entry["path"], entry.get("properties"))

    for name in data.get("dependencies", []):
        target.link(Target(name, source_dir=source_dir, binary_dir=build_dir))
    return target


def build_toolchain(
    data: dict[str, Any], base_dir: Path, configure: Configure
) -> QtToolchain:
    """Create the QtToolchain from the [qt] table, detecting Qt if needed."""
    qt = data.get("qt", {})
    hints: list[Path | str] = [base_dir / h for h in qt.get("hints", [])]
    tools = {name: base_dir / p for name, p in qt.get("tools", {}).items()}

    version_text = qt.get("version")
    if version_text is None:
        toolchain = QtToolchain.detect(configure, hints=hints)
    else:
        major, _, minor = str(version_text).partition(".")
        try:
            version = QtVersion(int(major), int(minor.split(".")[0] or 0))
        except ValueError:
            raise AutogenError(f"invalid Qt version: {version_text!r}") from None
        toolchain = QtToolchain(version, hints=hints, configure=configure)

    toolchain.tools.update(tools)
    toolchain.built_tools.update(qt.get("built_tools", {}))
    toolchain.predefs_command = list(qt.get("predefs_command", []))
    return toolchain


def make_initializer(args: argparse.Namespace) -> tuple[AutogenInitializer, Configure]:
    """Set up the initializer for the description named on the command line.

    Raises:
        AutogenError: If the description is invalid.
    """
    description = Path(args.description).absolute()
    build_dir = Path(args.build_dir).absolute()
    variables, _ = parse_variables(getattr(args, "extra", []))

    data = load_description(description)
    base_dir = description.parent
    build = data.get("build", {})

    configure = Configure(build_dir=build_dir)
    target = build_target(data, base_dir, build_dir, variables)
    toolchain = build_toolchain(data, base_dir, configure)
    graph = RecordingBuildGraph(
        targets=set(build.get("known_targets", [])) | {d.name for d in target.dependencies}
    )
    try:
        policy = DualNeedPolicy(build.get("dual_need_policy", "conflict"))
    except ValueError:
        raise AutogenError(
            f"invalid dual_need_policy: {build['dual_need_policy']!r}", str(description)
        ) from None
    options = InitializerOptions(
        global_autogen_target=bool(build.get("global_autogen_target", False)),
        global_autorcc_target=bool(build.get("global_autorcc_target", False)),
        verbosity=int(build.get("verbosity", 0)),
        dual_need_policy=policy,
    )
    initializer = AutogenInitializer(
        target,
        toolchain,
        graph,
        configs=BuildConfigs(build.get("configs", [])),
        options=options,
    )
    return initializer, configure


def cmd_init(args: argparse.Namespace) -> int:
    """Plan the autogen steps of a target and write its info files."""
    setup_logging(args.verbose, args.debug)

    try:
        initializer, configure = make_initializer(args)
        result = initializer.run()
    except AutogenError as e:
        logger.error("%s", e)
        return 1
    configure.save()

    for step in result.plan.steps:
        print(f"{step.name}: {step.comment}")
        print(f"  command: {' '.join(step.command)}")
        if step.depend_targets:
            print(f"  depends: {', '.join(step.depend_targets)}")
    for path in result.written:
        logger.info("Wrote %s", path)
    for failure in result.failures:
        print(f"warning: {failure}")
    if not result.plan.steps:
        print(f"{initializer.target.name}: nothing to generate")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Report whether the info files of a target are up to date.

    Returns 1 when any info file is missing or was written from
    different inputs.
    """
    setup_logging(args.verbose, args.debug)

    try:
        initializer, _ = make_initializer(args)
        plan = initializer.init_custom_targets()
    except AutogenError as e:
        logger.error("%s", e)
        return 1

    checks: list[tuple[Path, str]] = []
    if plan.autogen is not None:
        checks.append((plan.autogen.info_file, "AM_INPUT_FINGERPRINT"))
    for manifest in plan.manifests:
        for info_file in manifest.info_files.values():
            checks.append((info_file, "ARCC_INPUT_FINGERPRINT"))

    stale = [path for path, key in checks if is_stale(path, plan.fingerprint, key)]
    for path in stale:
        print(f"stale: {path}")
    if stale:
        return 1
    print(f"{initializer.target.name}: up to date")
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-B", "--build-dir", default="build", help="Build directory (default: build)"
    )
    parser.add_argument("description", help="Target description (TOML)")
    parser.add_argument(
        "extra",
        nargs="*",
        help="Target property overrides (KEY=value)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the qautogen CLI."""
    parser = argparse.ArgumentParser(
        prog="qautogen",
        description="Plan Qt moc/uic/rcc generation for a build target.",
        epilog="Run 'qautogen <command> --help' for command-specific help.",
    )
    from qautogen import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # qautogen init
    init_parser = subparsers.add_parser(
        "init", help="Write the info files and plan the generation steps"
    )
    add_common_args(init_parser)
    init_parser.set_defaults(func=cmd_init)

    # qautogen status
    status_parser = subparsers.add_parser(
        "status", help="Check whether the info files are up to date"
    )
    add_common_args(status_parser)
    status_parser.set_defaults(func=cmd_status)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # Run the specified command
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
