import time
from pathlib import Path
from typing import Iterable, List, Set

class RecognitionLogger:
    """
    Logs recognized people entering and leaving the scene to a text file.
    Unrecognized faces ("") are not tracked.
    """
    def __init__(self, log_file_path: str = "data/recognition_log.txt", echo: bool = True):
        self.log_file_path = Path(log_file_path)
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        self.echo = bool(echo)

        # names present in the previous frame
        self.present: Set[str] = set()

    def log_activity(self, person_name: str, activity: str):
        """Log an activity with timestamp to the file."""
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] {person_name}: {activity}\n"

        try:
            with open(self.log_file_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError as e:
            print(f"[RecognitionLogger] Error writing to log: {e}")

        if self.echo:
            print(f"[Recognition Log] {person_name}: {activity}")

    def update_scene(self, names: Iterable[str]) -> List[str]:
        """Diff the names seen in this frame against the last one and log changes."""
        current = {n for n in names if n}
        events: List[str] = []

        for name in sorted(current - self.present):
            self.log_activity(name, "entered scene")
            events.append(f"{name}: entered scene")
        for name in sorted(self.present - current):
            self.log_activity(name, "left scene")
            events.append(f"{name}: left scene")

        self.present = current
        return events

    def clear(self):
        self.present.clear()
