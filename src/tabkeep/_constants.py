"""Internal constants shared across the library."""

#: Key the snapshot document is stored under.
STORAGE_KEY = "savedState"

#: Group id the browser reports for tabs that belong to no group.
TAB_GROUP_ID_NONE = -1

#: Position stored for tabs saved one at a time.  The live position of a
#: single tab carries no meaning once it has been persisted.
SAVED_TAB_PLACEHOLDER_INDEX = 0
