#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Functional test-suite for the htmltrim rewrite engine.

• Fixed page scenarios (AppleScript sample, FAQ definition list).
• <pre> protection, comment removal, empty cells and paragraphs.
• Idempotence, alternate rule sets and the shield-failure fallback.
"""
from __future__ import annotations

import re
import time
import unittest
from unittest.mock import Mock, patch

from htmltrim.processing import trimmer as trimmer_mod
from htmltrim.processing.rules import DEFAULT_RULES, build_rule
from htmltrim.processing.trimmer import (
    WhitespaceTrimmer,
    build_shield,
    placeholder_token,
    remove,
)
from htmltrim.runtime.config import TrimSwitch

# --------------------------------------------------------------------------- #
#  Fixtures                                                                   #
# --------------------------------------------------------------------------- #
APPLESCRIPT_IN = (
    b'<hr />\n\t<p> Here is an example of AppleScript:</p>\n\n'
    b'\t<pre class="AppleScript">\n\n\ttell application &quot;Foo&quot;\n'
    b'\t  beep\n\tend tell\n\n\t</pre>\n\n\t<hr />'
)
APPLESCRIPT_OUT = (
    b'<hr /><p>Here is an example of AppleScript:</p>'
    b'<pre class="AppleScript">\n\n\ttell application &quot;Foo&quot;\n'
    b'\t  beep\n\tend tell\n\n\t</pre><hr />'
)

FAQ_IN = (
    b'\n\t<p>\n\tbla bla bla\n\t</p>\n\n\t<dl class="faq">\n\n'
    b'\t<dt>\n\tquestion one\n\t</dt>\n\n\t<dd>\n\tanswer 1\n\t</dd>\n\n'
    b'\t<dt>\n\tquestion two\n\t</dt>\n\n'
    b'\t<dd>\n\t<pre>\n\t\tanswer 2\n\t</pre>\n\t</dd>\n\n\t</dl>\n\t'
)
FAQ_OUT = (
    b'<p>bla bla bla</p><dl class="faq"><dt>question one</dt><dd>answer 1</dd>'
    b'<dt>question two</dt><dd><pre>\n\t\tanswer 2\n\t</pre></dd></dl>'
)

SAMPLES = [
    APPLESCRIPT_IN,
    FAQ_IN,
    b'<!DOCTYPE html>\n<html>\n <head>\n  <title> T </title>\n </head>\n'
    b' <body>\n  <!-- nav -->\n  <div class="c">\n   <h1> Title </h1>\n'
    b'   <p>Text <a href="/x">  link</a> more.</p>\n  </div>\n </body>\n</html>\n',
    b'<ul>\n  <li><a href="#">  One</a></li>\n  <li>Two</li>\n</ul>',
    b'<form action="/s">\n <fieldset>\n  <legend> L </legend>\n'
    b'  <select>\n   <option value="1"> One </option>\n  </select>\n </fieldset>\n</form>',
]


class TrimmerBaseTest(unittest.TestCase):
    def setUp(self) -> None:
        self.trimmer = WhitespaceTrimmer()

    def trim(self, page: bytes) -> bytes:
        return self.trimmer.transform(page)


# --------------------------------------------------------------------------- #
#  1. Reference pages                                                         #
# --------------------------------------------------------------------------- #
class ReferencePageTests(TrimmerBaseTest):
    def test_applescript_sample(self) -> None:
        self.assertEqual(self.trim(APPLESCRIPT_IN), APPLESCRIPT_OUT)

    def test_definition_list_with_nested_pre(self) -> None:
        self.assertEqual(self.trim(FAQ_IN), FAQ_OUT)

    def test_document_skeleton(self) -> None:
        page = (b'<!DOCTYPE html>\n<html>\n  <head>\n    <title> T </title>\n'
                b'  </head>\n  <body>\n  </body>\n</html>\n')
        self.assertEqual(
            self.trim(page),
            b'<!DOCTYPE html><html><head><title>T</title></head><body></body></html>',
        )


# --------------------------------------------------------------------------- #
#  2. Individual rules                                                        #
# --------------------------------------------------------------------------- #
class RuleBehaviourTests(TrimmerBaseTest):
    def test_multiline_comment_removed(self) -> None:
        page = b'<div>\n  <!-- a\n multi-line\n comment -->\n  <span>x</span>\n</div>'
        out = self.trim(page)
        self.assertEqual(out, b'<div><span>x</span></div>')
        self.assertNotIn(b'<!--', out)
        self.assertNotIn(b'-->', out)

    def test_empty_cells_get_nbsp(self) -> None:
        page = b'<table><tr><td>   </td><td class="x"> </td><td>v</td></tr></table>'
        self.assertEqual(
            self.trim(page),
            b'<table><tr><td>&#160;</td><td class="x">&#160;</td><td>v</td></tr></table>',
        )

    def test_cell_without_content_gets_nbsp(self) -> None:
        self.assertEqual(
            self.trim(b'<table><tr><td></td></tr></table>'),
            b'<table><tr><td>&#160;</td></tr></table>',
        )

    def test_adjacent_document_tags(self) -> None:
        self.assertEqual(
            self.trim(b'<body> <link rel="x"> <meta charset="utf-8">\n text'),
            b'<body><link rel="x"><meta charset="utf-8">text',
        )
        self.assertEqual(self.trim(b'a <br> <br>\n b'), b'a<br><br>b')

    def test_whitespace_only_paragraph_removed(self) -> None:
        self.assertEqual(self.trim(b'<p>   </p>'), b'')
        self.assertEqual(
            self.trim(b'<div>a</div><p class="lead">\n</p><div>b</div>'),
            b'<div>a</div><div>b</div>',
        )

    def test_space_before_anchor_kept(self) -> None:
        self.assertEqual(
            self.trim(b'see <a href="/x">  link</a> now'),
            b'see <a href="/x">link</a> now',
        )

    def test_whitespace_before_gt_removed(self) -> None:
        self.assertEqual(self.trim(b'<span class="a"  >x</span >'), b'<span class="a">x</span>')

    def test_line_breaks_and_rules(self) -> None:
        self.assertEqual(self.trim(b'line one\n<br />\nline two\n<HR>\nend'),
                         b'line one<br />line two<HR>end')

    def test_tag_names_are_case_insensitive(self) -> None:
        self.assertEqual(self.trim(b'<DIV>\n  <P>Hi</P>\n</DIV>'), b'<DIV><P>Hi</P></DIV>')

    def test_tag_name_prefixes_do_not_match(self) -> None:
        page = b'<picture>\n  <source srcset="a.webp">\n</picture>'
        self.assertEqual(self.trim(page), page)

    def test_text_runs_keep_inner_spaces(self) -> None:
        self.assertEqual(self.trim(b'<p>one  two\nthree</p>'), b'<p>one  two\nthree</p>')


# --------------------------------------------------------------------------- #
#  3. <pre> protection                                                        #
# --------------------------------------------------------------------------- #
class PreformattedTests(TrimmerBaseTest):
    def test_interior_survives_verbatim(self) -> None:
        interior = b'\n  <!-- keep -->\n  <p>  spaced  </p>\\1 \\g<0>\n'
        page = b'<div>\n<pre>' + interior + b'</pre>\n</div>'
        out = self.trim(page)
        self.assertEqual(out, b'<div><pre>' + interior + b'</pre></div>')

    def test_identical_blocks_are_not_cross_substituted(self) -> None:
        page = b'<pre>a  b</pre>\n<p>x</p>\n<pre>a  b</pre>'
        self.assertEqual(self.trim(page), b'<pre>a  b</pre><p>x</p><pre>a  b</pre>')

    def test_many_blocks_keep_their_order(self) -> None:
        blocks = [b'<pre> %d </pre>' % i for i in range(12)]
        page = b'\n<p> gap </p>\n'.join(blocks)
        out = self.trim(page)
        self.assertEqual(out, b'<p>gap</p>'.join(blocks))

    def test_unbalanced_pre_is_plain_text(self) -> None:
        self.assertEqual(self.trim(b'<pre>\n  x\n<p> y </p>'), b'<pre>\n  x<p>y</p>')

    def test_pre_inside_comment_disappears(self) -> None:
        self.assertEqual(self.trim(b'<div><!-- <pre> x </pre> --></div>'), b'<div></div>')

    def test_placeholder_tokens_are_index_derived(self) -> None:
        tokens = {placeholder_token(i) for i in range(50)}
        self.assertEqual(len(tokens), 50)
        self.assertNotIn(placeholder_token(1), placeholder_token(11))

    def test_shield_escapes_block_literal(self) -> None:
        shield = build_shield(b' <pre>(.*)[x]+</pre>\n', 3)
        self.assertEqual(shield.token, placeholder_token(3))
        self.assertIsNotNone(shield.matcher.search(b'a  <pre>(.*)[x]+</pre>\n b'))
        self.assertIsNone(shield.matcher.search(b'<pre>zzz</pre>'))

    def test_shield_failure_is_not_fatal(self) -> None:
        real = trimmer_mod.build_shield

        def flaky(block: bytes, index: int):
            if index == 0:
                raise re.error('boom')
            return real(block, index)

        page = b'<div>\n<pre>\n  x  \n</pre>\n</div>\n<pre>  y  </pre>'
        with patch.object(trimmer_mod, 'build_shield', side_effect=flaky):
            with self.assertLogs('htmltrim.processing.trimmer', level='WARNING') as cm:
                out = self.trim(page)
        self.assertTrue(any('left unprotected' in line for line in cm.output))
        self.assertTrue(out.startswith(b'<div><pre>'))
        self.assertTrue(out.endswith(b'<pre>  y  </pre>'))

    def test_injected_logger_receives_shield_warning(self) -> None:
        log = Mock()
        trimmer = WhitespaceTrimmer(logger=log)
        with patch.object(trimmer_mod, 'build_shield', side_effect=re.error('boom')):
            self.assertEqual(trimmer.transform(b'<pre> x </pre>\n<p> y </p>'), b'<pre> x </pre><p>y</p>')
        log.warning.assert_called_once()
        self.assertIn('left unprotected', log.warning.call_args.args[0])


# --------------------------------------------------------------------------- #
#  4. Engine properties                                                       #
# --------------------------------------------------------------------------- #
class EnginePropertyTests(TrimmerBaseTest):
    def test_idempotent_on_samples(self) -> None:
        for page in SAMPLES:
            with self.subTest(page=page[:30]):
                once = self.trim(page)
                self.assertEqual(self.trim(once), once)

    def test_empty_input(self) -> None:
        self.assertEqual(self.trim(b''), b'')

    def test_bytes_like_input_returns_bytes(self) -> None:
        out = self.trim(bytearray(b'<p> x </p>'))
        self.assertIsInstance(out, bytes)
        self.assertEqual(out, b'<p>x</p>')

    def test_input_buffer_untouched(self) -> None:
        page = bytearray(APPLESCRIPT_IN)
        self.trim(page)
        self.assertEqual(bytes(page), APPLESCRIPT_IN)

    def test_stats(self) -> None:
        out, stats = self.trimmer.transform_with_stats(APPLESCRIPT_IN)
        self.assertEqual(out, APPLESCRIPT_OUT)
        self.assertEqual(stats.size_in, len(APPLESCRIPT_IN))
        self.assertEqual(stats.size_out, len(APPLESCRIPT_OUT))
        self.assertEqual(stats.blocks, 1)
        self.assertGreater(stats.saved, 0)

    def test_alternate_rule_set(self) -> None:
        custom = WhitespaceTrimmer(rules=[build_rule('foo', rb'foo', b'bar')])
        self.assertEqual(custom.transform(b'foo <pre>foo</pre>'), b'bar<pre>foo</pre>')
        self.assertEqual(len(custom.rules), 1)

    def test_rule_set_rejects_foreign_items(self) -> None:
        with self.assertRaises(TypeError):
            WhitespaceTrimmer(rules=['not a rule'])  # type: ignore[list-item]

    def test_default_rule_order(self) -> None:
        self.assertEqual(
            [r.name for r in DEFAULT_RULES],
            [
                'comments', 'document',
                'block-before', 'block-after',
                'list-before', 'list-after',
                'table-before', 'table-after',
                'form-before', 'form-after',
                'break', 'anchor', 'empty-cell', 'empty-paragraph', 'tag-close',
            ],
        )


# --------------------------------------------------------------------------- #
#  5. Long whitespace runs                                                    #
# --------------------------------------------------------------------------- #
class LongWhitespaceRunTests(TrimmerBaseTest):
    RUN = 200_000
    MAX_SECONDS = 2.0

    def timed_trim(self, page: bytes) -> bytes:
        start = time.perf_counter()
        out = self.trim(page)
        elapsed = time.perf_counter() - start
        self.assertLess(elapsed, self.MAX_SECONDS, f'{len(page)} bytes took {elapsed:.2f}s')
        return out

    def test_run_inside_text_is_kept(self) -> None:
        page = b'<p>a' + b' ' * self.RUN + b'b</p>'
        self.assertEqual(self.timed_trim(page), page)

    def test_runs_around_block_tags(self) -> None:
        page = b'<div>' + b'\n' * self.RUN + b'x' + b'\t' * self.RUN + b'</div>'
        self.assertEqual(self.timed_trim(page), b'<div>x</div>')

    def test_run_before_closing_bracket(self) -> None:
        page = b'<span' + b' ' * self.RUN + b'>x</span>'
        self.assertEqual(self.timed_trim(page), b'<span>x</span>')

    def test_runs_around_pre_block(self) -> None:
        page = b' ' * self.RUN + b'<pre> x </pre>' + b'\n' * self.RUN + b'<p> y </p>'
        self.assertEqual(self.timed_trim(page), b'<pre> x </pre><p>y</p>')

    def test_run_between_many_tags(self) -> None:
        page = (b'<li>' + b' ' * 2_000) * 100 + b'<br>' + b'\r\n' * self.RUN + b'end'
        self.assertEqual(self.timed_trim(page), b'<li>' * 100 + b'<br>end')


# --------------------------------------------------------------------------- #
#  6. remove() and the enable switch                                          #
# --------------------------------------------------------------------------- #
class RemoveTests(unittest.TestCase):
    def test_enabled_switch_trims(self) -> None:
        self.assertEqual(remove(APPLESCRIPT_IN, switch=TrimSwitch(True)), APPLESCRIPT_OUT)

    def test_disabled_switch_is_noop(self) -> None:
        page = b'<div>\n  <!-- c -->\n</div>'
        self.assertIs(remove(page, switch=TrimSwitch(False)), page)

    def test_custom_trimmer_used(self) -> None:
        custom = WhitespaceTrimmer(rules=[build_rule('x', rb'x', b'y')])
        self.assertEqual(remove(b'xx', switch=TrimSwitch(True), trimmer=custom), b'yy')


if __name__ == '__main__':
    unittest.main()
