"""
Example 01: Nested Builder

This example demonstrates building a nested object graph through callbacks
and serializing it to a dict, JSON and XML.
"""

from nestmap import Builder, Float, Integer, Mapper, String, attribute


class PaymentInstrument(Builder, Mapper):
    """Card details"""
    number = attribute(String)
    expiration_year = attribute(Integer)
    expiration_month = attribute(Integer)


class Amount(Builder, Mapper):
    """Money value"""
    value = attribute(Float)
    currency = attribute(String)


class Transaction(Builder, Mapper):
    """Card transaction"""
    cvv_code = attribute(String)
    amount = attribute(Amount)
    payment_instrument = attribute(PaymentInstrument)


def main():
    print("=== Nested Builder ===\n")

    # Build with decorators as callbacks
    print("1. Decorator callbacks:")

    @Transaction.build
    def transaction(t):
        t.cvv_code = "123"

        @t.amount
        def _(a):
            a.value = 45.0
            a.currency = "USD"

        @t.payment_instrument
        def _(p):
            p.number = "4242424242424242"
            p.expiration_year = 2045
            p.expiration_month = 12

    print(f"   Dict: {transaction.to_dict()}")
    print(f"   Access: transaction.amount().value = {transaction.amount().value}\n")

    # Plain assignment still works
    print("2. Direct assignment:")
    transaction.amount = Amount(value=10.0, currency="EUR")
    print(f"   JSON: {transaction.to_json()}\n")

    # XML
    print("3. XML:")
    print(f"   {transaction.to_xml(root='transaction')}")
    restored = Transaction.from_xml(transaction.to_xml())
    print(f"   Restored: {restored.to_dict()}")


if __name__ == "__main__":
    main()
