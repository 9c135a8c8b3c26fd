"""
The two fixed run sequences: diagnostic (read-only) and repair.

Each step wraps exactly one command, so a full diagnostic run writes
four audit entries and a full repair run writes six. Only computed
filesystem paths are templated into the commands.
"""

import shlex
from pathlib import Path

from searchfix.runner.executor import Command
from searchfix.runner.tasks import RunMode, Step
from searchfix.system_info import INDEX_SERVICE_LABEL, OUTLOOK_APP_NAME, OUTLOOK_BUNDLE_ID, OUTLOOK_SEARCH_INDEX


DIAGNOSTIC = "diagnostic"
REPAIR = "repair"

_APP = shlex.quote(OUTLOOK_APP_NAME)


# ── Command templates ─────────────────────────────────────────────────────────
# "not running" / "not set" are normal answers, not failures: keep the `|| echo` fallback.

def app_running_command() -> Command:
    return Command(f'pgrep -x {_APP} || echo "not running"')


def index_service_status_command() -> Command:
    return Command(
        f'launchctl print {INDEX_SERVICE_LABEL} 2>&1 | grep -E "state =|pid =" '
        '|| echo "state unknown"'
    )


def indexing_enabled_command() -> Command:
    return Command("mdutil -s /")


def feature_mode_command() -> Command:
    return Command(
        f'defaults read {OUTLOOK_BUNDLE_ID} IsRunningNewOutlook 2>/dev/null || echo "not set"'
    )


def quit_app_command() -> Command:
    return Command(
        f"if pgrep -x {_APP} >/dev/null; then "
        f"osascript -e 'tell application \"{OUTLOOK_APP_NAME}\" to quit'; fi"
    )


def delete_index_command(index_dir: Path) -> Command:
    return Command(f"rm -rf {shlex.quote(str(index_dir))}", elevated=True)


def reindex_command() -> Command:
    return Command("mdutil -E /", elevated=True)


def restart_index_service_command() -> Command:
    return Command(f"launchctl kickstart -k {INDEX_SERVICE_LABEL}", elevated=True)


def relaunch_app_command() -> Command:
    return Command(f"open -a {_APP}")


# ── Sequences ─────────────────────────────────────────────────────────────────

def diagnostic_mode() -> RunMode:
    return RunMode(
        name=DIAGNOSTIC,
        steps=(
            Step("Checking whether Outlook is running…", 0.25, (app_running_command(),)),
            Step("Checking Spotlight index service…", 0.50, (index_service_status_command(),)),
            Step("Checking whether indexing is enabled…", 0.75, (indexing_enabled_command(),)),
            Step("Checking Outlook feature mode…", 1.00, (feature_mode_command(),)),
        ),
        completion_message="Diagnostic complete.",
    )


def repair_mode(index_dir: Path = OUTLOOK_SEARCH_INDEX) -> RunMode:
    return RunMode(
        name=REPAIR,
        steps=(
            Step("Quitting Outlook…", 0.20, (quit_app_command(),)),
            Step("Checking Spotlight index service…", 0.35, (index_service_status_command(),)),
            Step("Deleting Outlook search index…", 0.55, (delete_index_command(index_dir),)),
            Step("Forcing a full reindex…", 0.75, (reindex_command(),)),
            Step("Restarting Spotlight index service…", 0.90, (restart_index_service_command(),)),
            Step("Relaunching Outlook…", 1.00, (relaunch_app_command(),)),
        ),
        completion_message="Repair complete.",
    )


def build_modes(index_dir: Path = OUTLOOK_SEARCH_INDEX) -> dict[str, RunMode]:
    """Return mode name → RunMode, with the repair sequence aimed at index_dir."""
    return {
        DIAGNOSTIC: diagnostic_mode(),
        REPAIR: repair_mode(index_dir),
    }
