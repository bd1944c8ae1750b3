"""
Command-line interface for the Input Recorder.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from recorder import __version__
from recorder.config import RecorderConfig
from recorder.errors import RecorderError


def _load_config(config: Optional[Path]) -> RecorderConfig:
    try:
        return RecorderConfig.from_file(config) if config else RecorderConfig()
    except ValidationError as e:
        click.echo(f"❌ Invalid configuration {config}:\n{e}", err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """Input Recorder - record and replay keyboard and mouse input."""
    pass


@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file"
)
@click.option(
    "--loop", "-l",
    is_flag=True,
    help="Start with looped playback enabled"
)
@click.option(
    "--backend", "-b",
    type=click.Choice(["auto", "pyautogui", "pynput"]),
    default=None,
    help="Input injection backend (overrides configuration)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
def run(
    config: Optional[Path],
    loop: bool,
    backend: Optional[str],
    verbose: bool
):
    """
    Listen for the control keys and record or replay input.

    Runs until interrupted with Ctrl+C.
    """
    from recorder.capture import CaptureController, InputSource
    from recorder.playback import OSController, PlaybackScheduler
    from recorder.session import SessionState

    recorder_config = _load_config(config)
    if loop:
        recorder_config.playback.loop = True
    if backend:
        recorder_config.playback.backend = backend

    logging.basicConfig(
        level=logging.DEBUG if verbose or recorder_config.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        sink = OSController(
            backend=recorder_config.playback.backend,
            fail_safe=recorder_config.playback.fail_safe,
        )
    except RecorderError as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1)

    session = SessionState(
        looping=recorder_config.playback.loop,
        pause_poll_interval=recorder_config.playback.pause_poll_interval,
    )
    scheduler = PlaybackScheduler(session, sink)
    controller = CaptureController(session, scheduler, recorder_config.hotkeys)
    source = InputSource(controller.handle)

    try:
        source.start()
    except RecorderError as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1)

    hotkeys = recorder_config.hotkeys
    click.echo(f"🎙️  Input Recorder ready ({sink.backend})")
    click.echo(f"   {hotkeys.start_record.upper():>6}  start recording")
    click.echo(f"   {hotkeys.stop.upper():>6}  stop")
    click.echo(f"   {hotkeys.toggle_loop.upper():>6}  toggle looping")
    click.echo(f"   {hotkeys.play_pause.upper():>6}  play / pause / resume")
    click.echo("   Ctrl+C to quit")

    try:
        source.join()
    except KeyboardInterrupt:
        click.echo("\n👋 Shutting down")
    finally:
        scheduler.stop()
        source.stop()


@main.command()
def keys():
    """List the keys that are replayed during playback."""
    from recorder.keys import supported_names

    click.echo("⌨️  Replayed keys (others are recorded but skipped on playback):")
    click.echo("   " + " ".join(supported_names()))


@main.command()
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=Path("recorder.yaml"),
    show_default=True,
    help="Where to write the configuration file"
)
def init_config(output: Path):
    """Write the default configuration to a YAML file."""
    if output.exists():
        click.echo(f"❌ {output} already exists", err=True)
        raise SystemExit(1)
    RecorderConfig().to_file(output)
    click.echo(f"✅ Configuration written to: {output}")


@main.command()
def check():
    """Check if OS control and global listening are available."""
    click.echo("🔍 Checking input dependencies...\n")

    # Check pyautogui
    try:
        import pyautogui
        click.echo("  ✅ pyautogui is available")
        screen_size = pyautogui.size()
        click.echo(f"     Screen size: {screen_size[0]}x{screen_size[1]}")
        pos = pyautogui.position()
        click.echo(f"     Mouse position: ({pos[0]}, {pos[1]})")
    except ImportError:
        click.echo("  ❌ pyautogui not installed")
        click.echo("     Install with: pip install pyautogui")
    except Exception as e:
        click.echo(f"  ⚠️  pyautogui error: {e}")

    # Check pynput
    try:
        from pynput import keyboard, mouse
        click.echo("  ✅ pynput is available (listening and fallback control)")
    except ImportError:
        click.echo("  ❌ pynput not installed, recording is unavailable")
        click.echo("     Install with: pip install pynput")
    except Exception as e:
        click.echo(f"  ⚠️  pynput error: {e}")

    click.echo("\n💡 Note: On macOS, grant accessibility and input monitoring permissions")
    click.echo("   to your terminal app for recording and playback to work.")


if __name__ == "__main__":
    main()
