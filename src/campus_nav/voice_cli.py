# voice_cli.py
# Interactive console for the campus navigator. Every bot reply is printed
# and spoken through pyttsx3 on a background worker thread.
#
# Commands:
#   <free text>          e.g. "Take me to the canteen", "yes", "cancel navigation"
#   gps <lat> <lon>      feed a position fix
#   lang en|ta           switch reply language
#   quit

import argparse
import logging
import queue
import threading
import traceback

import pyttsx3

from .matcher import quick_action_suggestions
from .models import Coord
from .nav_config import NavConfig
from .navigator import NavigationSystem
from .route_provider import OSRMRouteProvider

logger = logging.getLogger(__name__)

_tts_queue: "queue.Queue" = queue.Queue()


def init_tts(rate: int = 165):
    engine = pyttsx3.init()
    engine.setProperty("rate", rate)
    engine.setProperty("volume", 1.0)
    return engine


def _tts_worker(engine) -> None:
    while True:
        text = _tts_queue.get()
        try:
            if text is None:
                break
            engine.say(text)
            engine.runAndWait()
        except Exception as e:
            logger.error(f"TTS error: {e}")
        finally:
            _tts_queue.task_done()


def speak(text: str) -> None:
    text = (text or "").strip()
    if text:
        _tts_queue.put(text)


def parse_floats(parts, count: int):
    if len(parts) != count:
        raise ValueError(f"expected {count} numbers, got {len(parts)}")
    return [float(x) for x in parts]


def main() -> None:
    parser = argparse.ArgumentParser(description="Campus voice navigator console")
    parser.add_argument("--log-dir", default="logs")
    parser.add_argument("--mute", action="store_true", help="print replies without speaking")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = NavConfig(log_dir=args.log_dir)
    nav = NavigationSystem(provider=OSRMRouteProvider(config), config=config)

    worker = None
    if not args.mute:
        worker = threading.Thread(target=_tts_worker, args=(init_tts(),), daemon=True)
        worker.start()

    print("Commands:")
    print("  <text>            e.g. " + ", ".join(f'"{s}"' for s in quick_action_suggestions()[:3]))
    print("  gps <lat> <lon>")
    print("  lang en|ta")
    print("  quit")

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        if line.lower() in ("q", "quit", "exit"):
            break

        parts = line.split()
        cmd = parts[0].lower()

        try:
            if cmd == "gps":
                lat, lon = parse_floats(parts[1:], 2)
                nav.tick()
                result = nav.update(Coord(lat, lon))
                print(f"[NAV] {result.status.name} {result.progress_percent:.0f}%: {result.message}")
                if result.arrived_now:
                    speak(result.message)
                    nav.acknowledge_arrival()

            elif cmd == "lang" and len(parts) == 2:
                nav.language = parts[1].lower()
                print(f"[NAV] language: {nav.language}")

            else:
                reply = nav.handle_text(line)
                print(f"[BOT] {reply.message}")
                speak(reply.message)

        except ValueError as e:
            print(traceback.format_exc())
            print(f"[ERR] {e}")

    nav.close()
    if worker is not None:
        _tts_queue.join()       # let queued replies finish
        _tts_queue.put(None)    # stop the worker
        worker.join(timeout=5)


if __name__ == "__main__":
    main()
