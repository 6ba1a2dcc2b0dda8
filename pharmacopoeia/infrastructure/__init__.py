"""Infrastructure layer for Pharmacopoeia: settings and logging setup."""
