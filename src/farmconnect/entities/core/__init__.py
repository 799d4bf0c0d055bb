"""Identity entities: accounts (credentials) and profiles (role-tagged rows)."""
