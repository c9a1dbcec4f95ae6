from __future__ import annotations

# Plan:
# 1) Load config and pick the dependency source (test file or crates.io).
# 2) Build the transitive graph, then render it with the same depth bound.
# 3) Fatal errors exit non-zero with a single message and no partial tree.

import argparse
import logging
from pathlib import Path

from .config import Config, load_config
from .errors import CrateTreeError
from .graph import BuildResult, build_graph
from .render import render_adjacency, render_tree
from .sources.adjacency import AdjacencyProvider
from .sources.crates import CratesProvider, CratesSettings, open_client


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.init_config:
        _init_config(Path(args.config))
        return
    _configure_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
        if args.max_depth is not None:
            if args.max_depth < 0:
                raise SystemExit("Error: --max-depth must be >= 0")
            config.max_depth = args.max_depth
        if config.used_legacy:
            logger.warning("Using legacy config keys; rename to mode/ascii_tree/output_file.")
        result, source = _build(config)
    except (CrateTreeError, OSError) as exc:
        raise SystemExit(f"Error: {exc}")

    lines = [_header(result, source)]
    if config.ascii_tree:
        lines.extend(render_tree(result.graph, result.root, config.max_depth))
    else:
        lines.extend(render_adjacency(result.graph))

    output = "\n".join(lines)
    print(output)
    if config.output_file:
        try:
            Path(config.output_file).write_text(output + "\n", encoding="utf-8")
        except OSError as exc:
            raise SystemExit(f"Error: cannot write {config.output_file}: {exc}")
        logger.info("Wrote dependency tree to %s", config.output_file)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a package's transitive dependencies as a tree")
    parser.add_argument("--config", default="./config.yaml")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--max-depth", type=int, default=None, help="Override max_depth from the config")
    parser.add_argument("--init-config", action="store_true", help="Create a config.yaml template and exit")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")


def _build(config: Config) -> tuple[BuildResult, str]:
    if config.mode == "test":
        provider = AdjacencyProvider.from_file(config.repository)
        result = build_graph(provider, config.name, config.version, config.max_depth)
        return result, provider.describe()

    settings = CratesSettings(
        base_url=config.settings.registry_url,
        timeout_seconds=config.settings.request_timeout_seconds,
        user_agent=config.settings.user_agent,
        include_optional=config.settings.include_optional,
    )
    version = None if config.wants_latest else config.version
    with open_client(settings) as client:
        provider = CratesProvider(settings, client)
        result = build_graph(provider, config.name, version, config.max_depth)
    return result, provider.describe()


def _header(result: BuildResult, source: str) -> str:
    version = f" v{result.version}" if result.version else ""
    return f"Dependency graph for {result.root}{version} ({source}):"


def _init_config(target: Path) -> None:
    if target.exists():
        raise SystemExit(f"Config already exists at {target}")
    template = Path(__file__).resolve().parent / "config.example.yaml"
    if not template.exists():
        raise SystemExit("config.example.yaml not found")
    target.write_text(template.read_text(encoding="utf-8"), encoding="utf-8")
    print(f"Wrote config template to {target}")


if __name__ == "__main__":
    main()
