"""Archive pipeline core: errors, hashing, archive builder, orchestration."""
