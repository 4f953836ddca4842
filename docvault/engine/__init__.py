"""DocVault Engine — configuration, errors and logging."""
