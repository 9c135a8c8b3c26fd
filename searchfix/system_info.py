"""
Filesystem locations and identifiers the run modes are templated with.

Everything here is computed from the home directory at import time.
Nothing is read from user input.
"""

from pathlib import Path


HOME = Path.home()

OUTLOOK_APP_NAME = "Microsoft Outlook"
OUTLOOK_BUNDLE_ID = "com.microsoft.Outlook"

# Office apps share this App Group container
OFFICE_GROUP_CONTAINER = HOME / "Library" / "Group Containers" / "UBF8T346G9.Office"

OUTLOOK_PROFILE_DATA = (
    OFFICE_GROUP_CONTAINER / "Outlook" / "Outlook 15 Profiles" / "Main Profile" / "Data"
)

# Spotlight importer output for the Outlook profile; mds rebuilds it after deletion
OUTLOOK_SEARCH_INDEX = OUTLOOK_PROFILE_DATA / "Spotlight"

INDEX_SERVICE_LABEL = "system/com.apple.metadata.mds"

DEFAULT_LOG_PATH = HOME / "Library" / "Logs" / "searchfix" / "searchfix.log"
