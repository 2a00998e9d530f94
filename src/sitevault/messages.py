"""User messages for SiteVault."""

# Success messages
SUCCESS_ADDED = "Added credentials for {site} / {user}"
SUCCESS_UPDATED = "Updated credentials for {site} / {user}"
SUCCESS_DELETED = "Deleted credentials for {site} / {user}"
SUCCESS_IMPORTED = "Imported {count} credential(s) across {sites} site(s)"
SUCCESS_ROTATED = "Master password changed, {count} credential(s) re-encrypted"
SUCCESS_CREATED = "Master password set"

# Error messages
ERROR_MAX_ATTEMPTS = "Maximum attempts exceeded"
ERROR_ATTEMPTS_REMAINING = "Invalid master password ({remaining} attempts remaining)"
ERROR_EMPTY_PASSWORD = "Password cannot be empty"
ERROR_PASSWORD_TOO_LONG = "Password cannot exceed {limit} characters"
ERROR_PASSWORD_TOO_LARGE = "Password size cannot exceed {limit} bytes"
ERROR_KEY_FILE_MISSING = (
    "Key file '{path}' is missing but the store has credentials. "
    "Restore the key file to unlock."
)
ERROR_NOT_INITIALIZED = "No master password set. Run 'sitevault init' first."
ERROR_ALREADY_INITIALIZED = "Key file '{path}' already exists"
ERROR_STORE_NOT_EMPTY = (
    "Store at '{path}' already has {count} credential(s). Use --force to replace it."
)
ERROR_FILE_NOT_FOUND = "File '{path}' not found"
ERROR_OPERATION_CANCELLED = "Operation cancelled"

# Info messages
INFO_NO_ENTRIES = "No credentials stored"
INFO_CANCELLED = "Cancelled"
INFO_CREATING = "Creating new credential store at {path}"
INFO_PASSWORD_HIDDEN = "Password hidden"
