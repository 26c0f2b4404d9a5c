"""LDAP authentication bridge for phone-number based signin flows."""
