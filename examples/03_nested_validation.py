"""
Example 03: Nested Validation

This example demonstrates cascading validation into nested attributes and
configuring the error path separator.
"""

from nestmap import Builder, Float, Mapper, NestedValidations, String, Validations, attribute, validates


class Amount(Validations, Builder, Mapper):
    """Money value"""
    value = attribute(Float)
    currency = attribute(String)

    @validates("value")
    def _positive(self, value):
        if value is None or value <= 0:
            return "must be positive"

    @validates("currency")
    def _currency(self, value):
        if not value:
            return "can't be blank"


class Transaction(NestedValidations, Builder, Mapper):
    """Card transaction"""
    cvv_code = attribute(String)
    amount = attribute(Amount)


class Refund(Transaction, nested_attr_name_separator="/"):
    """Refund reported with slash-separated error paths"""


def main():
    print("=== Nested Validation ===\n")

    transaction = Transaction.build(lambda t: t.amount(lambda a: setattr(a, "value", -5.0)))
    print(f"1. Valid: {transaction.validate()}")
    for message in transaction.errors.full_messages():
        print(f"   - {message}")
    print()

    refund = Refund(amount=Amount(currency="USD"))
    print(f"2. Valid: {refund.validate()}")
    print(f"   Errors: {refund.errors.to_dict()}")


if __name__ == "__main__":
    main()
