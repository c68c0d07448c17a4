from urllib.parse import unquote, urlsplit

from hypothesis import given, settings, strategies as st

from storefront.cart.models import CartItem
from storefront.checkout.controller import parse_checkout_form
from storefront.checkout.summary import build_messaging_link, build_order_summary, encode_order_summary


BASE_FORM = {
    "firstName": "Jane",
    "lastName": "Wanjiku",
    "address": "12 Moi Avenue",
    "city": "Nairobi",
    "county": "Nairobi",
    "zip": "00100",
    "phone": "0712 345 678",
    "email": "jane.wanjiku@shop.co.ke",
    "paymentMethod": "cash-on-delivery",
}


def _items():
    return [
        CartItem(id="a", name="Kettle", price=2000, quantity=2),
        CartItem(id="c", name="Radio", price=1999.5, quantity=1),
    ]


def test_summary_sections_in_fixed_order(checkout_form):
    form = parse_checkout_form({**checkout_form, "companyName": "Jikoni Ltd", "addressLine2": "Floor 3", "notes": "Call first"})

    text = build_order_summary(form, _items())
    lines = text.split("\n")

    assert lines[0] == "*New Order from Jane Wanjiku*"
    assert lines[3] == "Phone: 0712 345 678"
    assert lines[4] == "Email: jane.wanjiku@shop.co.ke"
    assert lines[6:11] == ["*Shipping Address:*", "12 Moi Avenue", "Floor 3", "Nairobi, Nairobi, 00100", "Kenya"]
    assert "Company: Jikoni Ltd" in lines
    assert "*Order Items (3 items):*" in lines
    assert text.index("Kettle (x2) - KSh 4,000") < text.index("Radio (x1) - KSh 1,999.5")
    assert "*Total: KSh 5,999.5*" in lines
    assert "*Payment Method:* Cash on Delivery" in lines
    assert lines[-2:] == ["*Order Notes:*", "Call first"]


def test_optional_sections_are_omitted(checkout_form):
    form = parse_checkout_form({**checkout_form, "zip": "", "paymentMethod": "mobile-money"})

    text = build_order_summary(form, _items())

    assert "Company:" not in text
    assert "*Order Notes:*" not in text
    assert "Nairobi, Nairobi\nKenya" in text
    assert "*Payment Method:* M-Pesa" in text


def test_country_is_configurable(checkout_form):
    form = parse_checkout_form(checkout_form)
    assert "\nUganda\n" in build_order_summary(form, _items(), country="Uganda")


def test_encode_line_breaks_and_reserved_characters():
    encoded = encode_order_summary("a\nb & c=d #1/2")
    assert encoded == "a%0Ab%20%26%20c%3Dd%20%231%2F2"


def test_messaging_link_shape(checkout_form):
    form = parse_checkout_form(checkout_form)
    text = build_order_summary(form, _items())

    link = build_messaging_link(text, "254743039253", "wa.me")
    parts = urlsplit(link)

    assert link.startswith("https://wa.me/254743039253?text=")
    assert unquote(parts.query[len("text="):]) == text


@settings(max_examples=100)
@given(st.text())
def test_encoding_round_trips(text):
    assert unquote(encode_order_summary(text)) == text


_field_text = st.text(
    alphabet=st.characters(exclude_categories=("Cs", "Cc", "Zl", "Zp")),
    min_size=1,
    max_size=40,
).map(str.strip).filter(bool)


@settings(max_examples=50)
@given(first=_field_text, city=_field_text, notes=_field_text)
def test_decoded_link_recovers_field_values(first, city, notes):
    form = parse_checkout_form({**BASE_FORM, "firstName": first, "city": city, "notes": notes})
    link = build_messaging_link(build_order_summary(form, _items()), "254743039253", "wa.me")

    decoded = unquote(link.split("?text=", 1)[1])

    assert f"*New Order from {first} Wanjiku*" in decoded
    assert f"{city}, Nairobi, 00100" in decoded
    assert decoded.endswith(f"*Order Notes:*\n{notes}")
