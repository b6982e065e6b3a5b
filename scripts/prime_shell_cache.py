# Install and activate the offline app-shell cache
from __future__ import annotations
import argparse
from dataclasses import replace
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from vanbox_core.config import load_secrets_file, load_settings
from vanbox_core.errors import ShellFetchError, ShellInstallError, VanboxError
from vanbox_core.logging import setup_logging
from vanbox_core.offline import OfflineShellCache, ShellRequest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download the Vanbox app shell into the offline cache and drop stale generations"
    )
    parser.add_argument("--secrets", type=Path, help="Path to secrets.toml (default: .streamlit/secrets.toml)")
    parser.add_argument("--base-url", help="Override [vanbox.shell_cache] base_url")
    parser.add_argument("--check", metavar="PATH", help="Only serve PATH through the cache-first policy")
    parser.add_argument(
        "--document",
        action="store_true",
        help="Treat --check PATH as a top-level page navigation",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        settings = load_settings(load_secrets_file(args.secrets))
    except VanboxError as e:
        print(f"❌ {e.message}")
        return 1

    shell_settings = settings.shell_cache
    if args.base_url:
        shell_settings = replace(shell_settings, base_url=args.base_url.rstrip("/"))

    shell = OfflineShellCache(shell_settings)

    if args.check:
        request = ShellRequest(args.check, destination="document" if args.document else "")
        try:
            response = shell.handle_fetch(request)
        except ShellFetchError as e:
            print(f"❌ {e.message}")
            return 1
        source = "cache" if response.from_cache else "network"
        print(f"✅ {args.check} -> HTTP {response.status} from {source} ({len(response.body)} bytes)")
        return 0

    print("=" * 60)
    print(f"📦 Shell cache: {shell.cache_name}")
    print(f"🌐 Source: {shell_settings.base_url}")
    print(f"📁 Directory: {shell_settings.cache_dir}")
    print("=" * 60)

    try:
        count = shell.install()
    except ShellInstallError as e:
        print(f"❌ {e.message}")
        for path in e.details.get("failed_paths", []):
            print(f"   - {path}")
        return 1

    removed = shell.activate()
    print(f"✅ Cached {count} resources")
    if removed:
        print(f"🧹 Removed stale generations: {', '.join(removed)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
