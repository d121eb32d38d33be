"""
Example 02: Partial Updates

This example demonstrates tracking assigned attributes to apply a PATCH
payload onto a stored object without overwriting untouched fields.
"""

import json

from nestmap import AssignedAttributes, Mapper, String, alias, attribute


class User(AssignedAttributes, Mapper):
    """User profile"""
    first_name = attribute(String)
    last_name = attribute(String)
    email = attribute(String)
    name = alias("first_name")


def main():
    print("=== Partial Updates ===\n")

    stored = User(first_name="Alice", last_name="Smith", email="alice@example.com")
    print(f"1. Stored: {stored.to_dict()}")
    print(f"   Assigned after construction: {stored.assigned_attribute_names}\n")

    patch = User.from_json(json.dumps({"name": "Alicia", "email": None}))
    print(f"2. Patch assigned: {sorted(patch.assigned_attribute_names)}")

    for assigned in patch.assigned_values():
        stored.write_attribute(assigned.name, assigned.value)
    print(f"   Result: {stored.to_dict()}")


if __name__ == "__main__":
    main()
