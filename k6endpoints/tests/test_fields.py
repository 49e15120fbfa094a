"""Tests for header, body, auth and assertion extraction."""

from k6endpoints.parsers.delimiters import NOT_FOUND
from k6endpoints.parsers.fields import (
    clean_body_string,
    extract_body,
    extract_expectation,
    extract_headers_block,
    extract_options_fields,
    find_top_level_value,
    iter_top_level_keys,
)


class TestExtractOptionsFields:
    """Test extract_options_fields."""

    def test_headers_auth_and_body(self):
        """Test a fully populated options object."""
        options = """{
          headers: {
            'Content-Type': 'application/json',
            Authorization: `Bearer ${token}`,
          },
          data: { name: 'foo' },
        }"""
        fields = extract_options_fields(options)
        assert fields.content_type == "application/json"
        assert fields.bearer is True
        assert fields.body == "{ name: 'foo' }"

    def test_content_type_case_insensitive(self):
        """Test lower-case header keys."""
        fields = extract_options_fields("{ headers: { 'content-type': 'text/plain' } }")
        assert fields.content_type == "text/plain"

    def test_basic_auth_is_not_bearer(self):
        """Test that non-bearer authorization is ignored."""
        fields = extract_options_fields("{ headers: { authorization: 'Basic abc' } }")
        assert fields.bearer is False

    def test_content_type_inside_body_ignored(self):
        """Test that header-like text in the payload is not read as a header."""
        options = """{ data: { note: "'content-type': 'text/csv'", auth: "Authorization: 'Bearer x'" } }"""
        fields = extract_options_fields(options)
        assert fields.content_type is None
        assert fields.bearer is False

    def test_nested_headers_ignored(self):
        """Test that only the top-level headers block is read."""
        options = "{ data: { headers: { 'Content-Type': 'text/csv' } } }"
        assert extract_options_fields(options).content_type is None

    def test_empty_options(self):
        """Test that empty options yield nothing."""
        fields = extract_options_fields("")
        assert fields.content_type is None
        assert fields.bearer is False
        assert fields.body is None


class TestExtractBody:
    """Test extract_body."""

    def test_nested_object_collapsed(self):
        """Test that multi-line nested bodies are whitespace-collapsed."""
        options = """{
          data: {
            name: 'foo',
            tags: ['a', 'b'],
            owner: { id: 1 }
          }
        }"""
        assert extract_body(options) == "{ name: 'foo', tags: ['a', 'b'], owner: { id: 1 } }"

    def test_array_body(self):
        """Test an array payload."""
        assert extract_body("{ data: [1, 2, 3] }") == "[1, 2, 3]"

    def test_call_body(self):
        """Test a JSON.stringify body in fetch options."""
        options = "{ method: 'POST', body: JSON.stringify({ a: 1 }) }"
        assert extract_body(options) == "JSON.stringify({ a: 1 })"

    def test_scalar_body(self):
        """Test a variable payload."""
        assert extract_body("{ data: payload, headers: {} }") == "payload"

    def test_quoted_key(self):
        """Test a quoted data key."""
        assert extract_body("{ 'data': { a: 1 } }") == "{ a: 1 }"

    def test_unclosed_nested_body(self):
        """Test that an unclosed nested body is dropped."""
        assert extract_body("{ data: { a: 1 ") is None

    def test_no_body(self):
        """Test options without a body key."""
        assert extract_body("{ headers: { x: 'y' } }") is None

    def test_hyphenated_header_key_not_body(self):
        """Test that an X-Body header does not shadow the data key."""
        options = "{ headers: {'X-Body': 'y', 'Request-Data': 'z'}, data: {a:1} }"
        assert extract_body(options) == "{a:1}"

    def test_nested_body_key_ignored(self):
        """Test that body keys inside nested objects are skipped."""
        assert extract_body("{ params: { body: 1 }, data: [2] }") == "[2]"
        assert extract_body("{ params: { data: 1 } }") is None

    def test_quoted_string_body_keeps_commas(self):
        """Test that a string payload ends at its closing quote."""
        assert extract_body("{ body: 'hello, world' }") == "'hello, world'"
        assert extract_body('{ data: "a,b}c", headers: {} }') == '"a,b}c"'

    def test_key_inside_string_ignored(self):
        """Test that text inside a string literal is not a key."""
        assert extract_body("{ note: 'data: no', body: yes }") == "yes"

    def test_metadata_key_not_body(self):
        """Test that keys merely ending in data are ignored."""
        assert extract_body("{ metadata: { a: 1 } }") is None


class TestCleanBodyString:
    """Test clean_body_string."""

    def test_collapses_whitespace(self):
        """Test whitespace runs become single spaces."""
        assert clean_body_string("  {\n  a: 1,\n\tb: 2\n}  ") == "{ a: 1, b: 2 }"

    def test_empty(self):
        """Test empty and missing values."""
        assert clean_body_string("") is None
        assert clean_body_string(None) is None
        assert clean_body_string("   ") is None


class TestExtractExpectation:
    """Test extract_expectation."""

    def test_status_and_text(self):
        """Test status and text assertions together."""
        window = """;
    expect(response.status()).toBe(201);
    expect(await response.text()).toContain('created');
"""
        expectation = extract_expectation(window)
        assert expectation.status == 201
        assert expectation.substring == "created"

    def test_status_property(self):
        """Test a status property compared with toEqual."""
        assert extract_expectation("expect(res.status).toEqual(404);").status == 404

    def test_ok_normalized_to_200(self):
        """Test that an ok() truthiness assertion means 200."""
        assert extract_expectation("expect(response.ok()).toBeTruthy();").status == 200
        assert extract_expectation("expect(res.ok).toBe(true);").status == 200

    def test_first_assertion_wins(self):
        """Test that the earliest assertion is used across shapes."""
        window = "expect(res.ok()).toBeTruthy(); expect(res.status()).toBe(404);"
        assert extract_expectation(window).status == 200

        window = "expect(res.status()).toBe(404); expect(res.ok()).toBeTruthy();"
        assert extract_expectation(window).status == 404

    def test_out_of_range_status_skipped(self):
        """Test that impossible status codes are skipped."""
        window = "expect(res.status()).toBe(999); expect(res.status()).toBe(204);"
        assert extract_expectation(window).status == 204

    def test_plain_text_variable(self):
        """Test expect(text).toContain()."""
        window = 'const text = await res.text();\nexpect(text).toContain("hello world");'
        assert extract_expectation(window).substring == "hello world"

    def test_first_text_wins(self):
        """Test that the nearest text assertion is used."""
        window = "expect(text).toContain('one'); expect(text).toContain('two');"
        assert extract_expectation(window).substring == "one"

    def test_no_assertions(self):
        """Test a window without assertions."""
        expectation = extract_expectation("await page.goto('/');")
        assert expectation.status is None
        assert expectation.substring is None


class TestTopLevelKeys:
    """Test top-level key scanning of options objects."""

    def test_keys_in_order(self):
        """Test that only outermost keys are reported."""
        options = "{ headers: { 'X-Body': 'y' }, 'data': [1, { a: 2 }], method: 'POST' }"
        keys = [key.group("key") for key in iter_top_level_keys(options)]
        assert keys == ["headers", "data", "method"]

    def test_value_offset(self):
        """Test that the value offset points at the value."""
        options = "{ method: 'PUT', body: x }"
        assert options[find_top_level_value(options, ["BODY"]):] == "x }"
        assert find_top_level_value(options, ["data"]) == NOT_FOUND

    def test_unclosed_nested_object_stops_scan(self):
        """Test that an unclosed nested value ends the scan."""
        assert find_top_level_value("{ headers: { a: 1, data: 2", ["data"]) == NOT_FOUND

    def test_headers_block(self):
        """Test that the headers object literal is returned whole."""
        options = "{ data: {}, headers: { 'Content-Type': 'a/b' } }"
        assert extract_headers_block(options) == "{ 'Content-Type': 'a/b' }"
        assert extract_headers_block("{ headers: myHeaders }") == ""
        assert extract_headers_block("") == ""
