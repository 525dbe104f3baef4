"""CLI interface: speak, record, preview and voice listing."""

import argparse
import asyncio
import logging
import os
import signal
import sys

from scriptcast.config import ApiKeyProvider
from scriptcast.constants import OUTPUT_DIR, VERSION
from scriptcast.errors import ScriptcastError
from scriptcast.exporter import default_file_name, export_recording, render_recording
from scriptcast.models import NarratorMode, SessionState, VoiceAssignment
from scriptcast.parser import parse_script_detailed
from scriptcast.playback import PlaybackController
from scriptcast.player import AudioPlayer
from scriptcast.tts import make_synthesizer, preview_voice
from scriptcast.voices import PROVIDER_GOOGLE, PROVIDERS, build_assignment, get_voices, languages

logger = logging.getLogger(__name__)


def _read_script(file_path: str) -> str:
    """Read a script file, exiting on a missing or empty file."""
    if not os.path.exists(file_path):
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)

    with open(file_path, encoding="utf-8") as f:
        text = f.read()

    if not text.strip():
        print(f"Error: File is empty: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    return text


def _assignment_from_args(args) -> VoiceAssignment:
    try:
        return build_assignment(
            narrator=args.narrator,
            speaker_a=args.speaker_a,
            speaker_b=args.speaker_b,
            speaker_c=args.speaker_c,
            provider=args.provider,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)


def _install_stop_handler(loop: asyncio.AbstractEventLoop, stop) -> bool:
    """Route Ctrl-C to stop(). Returns False where signal handlers are unsupported."""
    try:
        loop.add_signal_handler(signal.SIGINT, stop)
    except NotImplementedError:
        logger.debug("Signal handlers unsupported; Ctrl-C will abort immediately")
        return False
    return True


async def _speak(text: str, voices: VoiceAssignment, mode: NarratorMode, controller: PlaybackController):
    controller.on_highlight(lambda start, end: print(f"  > {text[start:end]}"))
    controller.on_error(lambda kind, message: print(f"Error ({kind}): {message}", file=sys.stderr))

    loop = asyncio.get_running_loop()
    installed = _install_stop_handler(loop, controller.stop)
    try:
        return await controller.play(text, voices, mode)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)
        await controller.synthesizer.aclose()


def cmd_speak(args):
    """Play a script aloud, printing each line as it is spoken."""
    text = _read_script(args.file)
    voices = _assignment_from_args(args)
    controller = PlaybackController(make_synthesizer(args.provider))

    try:
        state = asyncio.run(_speak(text, voices, NarratorMode.parse(args.mode), controller))
    except ScriptcastError:
        # already reported by the error listener
        raise SystemExit(1)
    except KeyboardInterrupt:
        # no signal handler on this platform; asyncio.run cancelled the session
        state = SessionState.CANCELLED
    print(f"Playback {state.value}.")


async def _record(segments, synthesizer):
    try:
        return await render_recording(segments, synthesizer)
    finally:
        await synthesizer.aclose()


def cmd_record(args):
    """Render a script to an MP3 file."""
    text = _read_script(args.file)
    voices = _assignment_from_args(args)
    result = parse_script_detailed(text, voices, NarratorMode.parse(args.mode))

    if not result.segments:
        print(f"Error: Nothing to speak in: {args.file}", file=sys.stderr)
        raise SystemExit(1)

    file_name = args.name or default_file_name()
    print(f"Recording {len(result.segments)} segments ({len(result.anomalies)} lines skipped)")
    try:
        audio = asyncio.run(_record(result.segments, make_synthesizer(args.provider)))
        output_path = export_recording(audio, args.output, file_name)
    except ScriptcastError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    print(f"Done: {output_path}")


def cmd_preview(args):
    """Play the preview sentence in one voice."""
    synthesizer = make_synthesizer(args.provider)

    async def run():
        try:
            audio = await preview_voice(synthesizer, args.voice)
        finally:
            await synthesizer.aclose()
        if audio is None:
            return False
        return await AudioPlayer().play(audio, asyncio.Event())

    try:
        played = asyncio.run(run())
    except ScriptcastError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    if not played:
        print("No voice selected.")


def cmd_voices(args):
    """List catalog voices."""
    names = [args.language] if args.language else languages(args.provider)
    found = False
    for language in names:
        voices = [v for v in get_voices(language, args.provider) if v.id]
        if not voices:
            continue
        found = True
        print(f"{language}:")
        for v in voices:
            print(f"  {v.id:<22} {v.label}")
    if not found:
        print("No matching voices found.")


def cmd_set_key(args):
    """Store the Google API key in the settings file."""
    try:
        path = ApiKeyProvider().set(args.key)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    print(f"API key saved to {path}")


def _add_voice_options(parser):
    parser.add_argument("--narrator", help="Narrator voice id ('none' to leave unvoiced)")
    parser.add_argument("--speaker-a", help="Voice id for 'A:' lines")
    parser.add_argument("--speaker-b", help="Voice id for 'B:' lines")
    parser.add_argument("--speaker-c", help="Voice id for 'C:' lines")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in NarratorMode],
        default=NarratorMode.READ_ALL.value,
        help="Which narrator lines are spoken",
    )


def _add_provider_option(parser):
    parser.add_argument("--provider", choices=PROVIDERS, default=PROVIDER_GOOGLE, help="Speech service")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="scriptcast",
        description="Scriptcast — read multi-speaker scripts aloud with per-speaker voices",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # speak
    speak_parser = subparsers.add_parser("speak", help="Play a script aloud")
    speak_parser.add_argument("file", help="Path to the script text file")
    _add_voice_options(speak_parser)
    _add_provider_option(speak_parser)
    speak_parser.set_defaults(func=cmd_speak)

    # record
    record_parser = subparsers.add_parser("record", help="Render a script to MP3")
    record_parser.add_argument("file", help="Path to the script text file")
    record_parser.add_argument("-o", "--output", default=OUTPUT_DIR, help="Output directory")
    record_parser.add_argument("--name", help="File name without extension (default TTS_<timestamp>)")
    _add_voice_options(record_parser)
    _add_provider_option(record_parser)
    record_parser.set_defaults(func=cmd_record)

    # preview
    preview_parser = subparsers.add_parser("preview", help="Preview a voice")
    preview_parser.add_argument("voice", help="Voice id")
    _add_provider_option(preview_parser)
    preview_parser.set_defaults(func=cmd_preview)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--language", help="korean or english")
    _add_provider_option(voices_parser)
    voices_parser.set_defaults(func=cmd_voices)

    # set-key
    key_parser = subparsers.add_parser("set-key", help="Save the Google API key")
    key_parser.add_argument("key", help="Google Cloud API key")
    key_parser.set_defaults(func=cmd_set_key)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
