#!/usr/bin/env python3
"""Debug script: which browser launch configuration works in this environment."""

import asyncio
import os
import sys
from dotenv import load_dotenv

# Add project root to path
sys.path.append(os.getcwd())

from src.browser.driver import PlaywrightDriver
from src.browser.launcher import build_launch_chain
from src.config.settings import ConfigError, Settings


async def check_browser(stop_at_first: bool = True):
    """Walk the launch chain and report each configuration's outcome."""

    print("=== Browser Launch Report ===\n")

    print("1. Loading configuration...")
    load_dotenv()
    try:
        settings = Settings.from_env(load_env_file=False)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1
    print(f"  APP_ENV: {settings.env}")
    print(f"  BROWSER_TIMEOUT_MS: {settings.browser_timeout_ms}")
    print(f"  BROWSER_EXECUTABLE_PATH: {settings.browser_executable_path or '(not set)'}")
    print()

    chain = build_launch_chain(settings)
    print(f"2. Trying {len(chain)} launch configurations:")

    driver = PlaywrightDriver()
    working = []
    for number, config in enumerate(chain, start=1):
        if config.executable_path and not os.path.exists(config.executable_path):
            print(f"  {number:2d}. ✗ {config.label} (path does not exist)")
            continue
        try:
            browser = await driver.launch(config, settings.browser_timeout_ms)
        except Exception as e:
            first_line = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
            print(f"  {number:2d}. ✗ {config.label}: {first_line}")
            continue

        await browser.close()
        working.append(config)
        print(f"  {number:2d}. ✓ {config.label}")
        if stop_at_first:
            break
    print()

    print("=== ASSESSMENT ===")
    if not working:
        print("❌ No configuration could start a browser")
        print("   Run `playwright install chromium` or set BROWSER_EXECUTABLE_PATH")
        return 1

    first = working[0]
    position = chain.index(first) + 1
    if position == 1:
        print("✅ Primary configuration works")
    else:
        print(f"⚠️  Primary configuration failed; requests will start on attempt {position}")
        print(f"   Consider BROWSER_EXECUTABLE_PATH={first.executable_path or ''}")
    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(check_browser(stop_at_first="--all" not in sys.argv))
    sys.exit(exit_code)
