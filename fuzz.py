#!/usr/bin/env python3
"""
Random fuzzer for htliteral.
Interpolates hostile payloads into random templates and checks that the
rendered markup never gains elements or attributes the template did not have.
"""

import argparse
import random
import string
import sys
import time
import traceback

import html5lib

from htliteral import HypertextError, ValueSlot, interpolate

TAGS = [
    "div", "span", "p", "a", "img", "table", "td", "li", "form", "input", "button",
    "option", "h1", "pre", "code", "blockquote", "section", "details", "summary",
]

RAW_TEXT_TAGS = ["script", "style", "xmp", "iframe", "noembed", "noframes", "noscript"]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value", "type",
    "onclick", "data-x", "aria-label", "role", "tabindex",
]

PAYLOADS = [
    "<script>alert(1)</script>",
    "</script><script>alert(1)</script>",
    "</style><img src=x onerror=alert(1)>",
    "\" onmouseover=\"alert(1)",
    "' onmouseover='alert(1)",
    "x onmouseover=alert(1)",
    "x>",
    "><img src=x>",
    "<!--",
    "-->",
    "<![CDATA[",
    "&lt;script&gt;",
    "&amp;",
    "`",
    "=",
    "\x00",
    "\r\n",
    " ",
    "</SCRIPT >",
    "</title></textarea>",
    "javascript:alert(1)",
]

# Literal fragments that should be rejected wherever they appear.
BROKEN_LITERALS = [
    "<!DOCTYPE html>", "<![CDATA[x]]>", "<?xml version='1.0'?>", "< b>", "<3",
    "<div =x>", "<div a\"b>", "<a href=x\"y>", "<a title='x'b>", "<br/ >",
    "<!-->", "<!--->", "<!-- <!-- x -->", "<!-- x --!>", "<!x>", "<!---->",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_payload():
    """Generate a hostile value, sometimes glued to random text."""
    payload = random.choice(PAYLOADS)
    if random.random() < 0.3:
        payload = random_string() + payload + random_string()
    if random.random() < 0.1:
        payload = payload.upper()
    return payload


def fuzz_content():
    tag = random.choice(TAGS)
    return [f"<{tag}>", ValueSlot(random_payload()), f"</{tag}>"]


def fuzz_quoted_attribute():
    tag = random.choice(TAGS)
    attr = random.choice(ATTRIBUTES)
    quote = random.choice(["'", '"'])
    return [f"<{tag} {attr}={quote}", ValueSlot(random_payload()), f"{quote}>{random_string()}</{tag}>"]


def fuzz_unquoted_attribute():
    tag = random.choice(TAGS)
    attr = random.choice(ATTRIBUTES)
    return [f"<{tag} {attr}=", ValueSlot(random_payload()), random.choice([">", " >", "/>"]), f"</{tag}>"]


def fuzz_spread():
    tag = random.choice(TAGS)
    names = random.sample(ATTRIBUTES, random.randint(1, 3))
    spread = {name: random_payload() for name in names}
    return [f"<{tag} ", ValueSlot(spread), random.choice([">", " hidden>", "/>"]), f"</{tag}>"]


def fuzz_raw_text():
    tag = random.choice(RAW_TEXT_TAGS)
    return [f"<{tag}>{random_string()}", ValueSlot(random_payload()), f"</{tag}>"]


def fuzz_comment():
    return ["<!-- ", ValueSlot(random_payload()), " -->"]


def fuzz_broken_literal():
    return [random.choice(BROKEN_LITERALS), ValueSlot(random_payload())]


def generate_fuzzed_template():
    """Generate a list of literal chunks and values."""
    parts = []
    num_elements = random.randint(1, 8)
    for _ in range(num_elements):
        element_type = random.choices(
            [
                fuzz_content,
                fuzz_quoted_attribute,
                fuzz_unquoted_attribute,
                fuzz_spread,
                fuzz_raw_text,
                fuzz_comment,
                fuzz_broken_literal,
            ],
            weights=[20, 15, 10, 10, 8, 2, 2],
        )[0]
        parts.extend(element_type())
    return parts


def _structure(html):
    fragment = html5lib.parseFragment(html, treebuilder="etree", namespaceHTMLElements=False)
    return [
        (element.tag, tuple(sorted(element.attrib)))
        for element in fragment.iter()
        if isinstance(element.tag, str)
    ]


def _benign(part):
    if not isinstance(part, ValueSlot):
        return part
    if isinstance(part.value, dict):
        return ValueSlot({name: "x" for name in part.value})
    return ValueSlot("x")


def check_template(parts):
    """Render ``parts`` and compare its structure with a benign rendering.

    Returns an error description, or None when the template is fine.
    """
    try:
        html = str(interpolate(parts))
    except HypertextError:
        return None
    try:
        expected = str(interpolate([_benign(part) for part in parts]))
    except HypertextError as e:
        return f"benign rendering rejected after hostile one passed: {e}"
    if _structure(html) != _structure(expected):
        return f"structure changed: {html!r}"
    return None


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against htliteral."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    injections = []
    successes = 0

    print(f"Fuzzing htliteral with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        parts = generate_fuzzed_template()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            problem = check_template(parts)
        except Exception as e:
            crashes.append({
                "test_num": i,
                "parts": parts,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        if problem is None:
            successes += 1
        else:
            injections.append({"test_num": i, "parts": parts, "error": problem})
            if verbose:
                print(f"  INJECTION: Test {i}: {problem}")

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS: htliteral")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Injections:     {len(injections)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    for title, failures in (("CRASH DETAILS", crashes), ("INJECTION DETAILS", injections)):
        if not failures:
            continue
        print(f"\n{'='*60}")
        print(f"{title}:")
        print(f"{'='*60}")
        for failure in failures[:10]:
            print(f"\nTest #{failure['test_num']}:")
            print(f"  Parts: {failure['parts']!r}"[:300])
            print(f"  Error: {failure['error']}")
        if len(failures) > 10:
            print(f"\n... and {len(failures) - 10} more")

    if save_failures and (crashes or injections):
        filename = f"fuzz_failures_htliteral_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"Parts:\n{crash['parts']!r}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for injection in injections:
                f.write(f"=== INJECTION #{injection['test_num']} ===\n")
                f.write(f"Parts:\n{injection['parts']!r}\n")
                f.write(f"Error: {injection['error']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not injections


def main():
    parser = argparse.ArgumentParser(description="Fuzz htliteral with hostile interpolations")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed templates (no rendering)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_template())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
