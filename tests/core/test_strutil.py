from reactgen.core.strutil import camel_to_snake, remove_quotes


def test_remove_quotes():
    assert remove_quotes('"abc"') == "abc"
    assert remove_quotes("'a'") == "a"
    assert remove_quotes("'a") == "'a"
    assert remove_quotes('a"') == 'a"'
    assert remove_quotes('"') == '"'
    assert remove_quotes("'") == "'"
    assert remove_quotes("") == ""
    assert remove_quotes(None) is None


def test_remove_quotes_requires_matching_pair():
    assert remove_quotes("\"a'") == "\"a'"


def test_camel_to_snake():
    assert camel_to_snake("someString") == "some_string"
    assert camel_to_snake("AbcStr") == "abc_str"
    assert camel_to_snake("AST") == "ast"
    assert camel_to_snake("ASTBuilder") == "ast_builder"
    assert camel_to_snake("SomethingWithAPreamble") == "something_with_a_preamble"
