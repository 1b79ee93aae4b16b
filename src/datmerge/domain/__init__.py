"""Pure reconciliation domain: record model, sanitizing, admission and merge/diff logic."""
