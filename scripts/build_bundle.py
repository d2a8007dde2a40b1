#!/usr/bin/env python3
"""
Rebuild a video library bundle from the command line.

Lists videos/<clinic>/<department>/ and writes
bundles/<clinic>/<department>/bundle.json. With --video, also creates
the missing language folders of that video.

Usage:
    python scripts/build_bundle.py --clinic default --department ophthalmology
    python scripts/build_bundle.py --clinic default --department ophthalmology --video BunterStar

Requires:
    - .env file with STORAGE_* settings (or STORAGE_MOCK_MODE=true)
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.api.dependencies import build_storage_client
from src.config.settings import get_settings
from src.core.library.bundle import BundleBuilder
from src.core.library.folders import LanguageFolderInitializer


async def run(clinic: str, department: str, video: str | None, languages: list[str] | None) -> int:
    settings = get_settings()

    missing = settings.validate_required_fields()
    if missing:
        print(f"ERROR: Missing configuration: {', '.join(missing)}")
        return 1

    storage = build_storage_client(settings)

    if video:
        initializer = LanguageFolderInitializer(
            storage,
            default_languages=settings.supported_languages_list,
        )
        await initializer.ensure_language_folders(clinic, department, video, languages)
        print(f"[OK] Language folders ready for {clinic}/{department}/{video}")

    path = await BundleBuilder(storage).build(clinic, department)
    print(f"[OK] bundle.json created at {path}")
    return 0


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Rebuild a video library bundle')
    parser.add_argument('--clinic', required=True, help='Clinic identifier')
    parser.add_argument('--department', required=True, help='Department identifier')
    parser.add_argument('--video', help='Also create missing language folders for this video')
    parser.add_argument(
        '--languages',
        help='Comma-separated language codes for --video (default: SUPPORTED_LANGUAGES)',
    )

    args = parser.parse_args()

    languages = None
    if args.languages:
        languages = [lang.strip() for lang in args.languages.split(',') if lang.strip()]

    try:
        exit_code = asyncio.run(run(args.clinic, args.department, args.video, languages))
    except Exception as e:
        print(f"ERROR: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
