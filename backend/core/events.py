# core/events.py - canonical event type definitions
# All cross-module communication should use these constants as event_type values.

# Quote events
QUOTE_CREATED = "quote.created"                       # {quote_id, client_id, price}
QUOTE_STATUS_CHANGED = "quote.status_changed"         # {quote_id, old_status, new_status}

# Inventory events
STOCK_ADJUSTED = "inventory.stock_adjusted"           # {item_kind, item_id, delta, stock_level, reason}

# Trash events
TRASH_ARCHIVED = "trash.archived"                     # {trash_id, collection, original_id, stock_reconciled}
TRASH_RESTORED = "trash.restored"                     # {trash_id, collection, original_id}
TRASH_PURGED = "trash.purged"                         # {trash_id, collection, original_id}
