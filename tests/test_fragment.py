# tests/test_fragment.py
"""
Unit tests for ProDock.core.fragment
(covers spacers, path quoting and option flag translation).

Run with:
    python -m unittest tests.test_fragment
"""
import shlex
import unittest

from ProDock.core.dockutil import DockutilService
from ProDock.core.fragment import build_fragment, build_fragments, option_flags, quote_path
from ProDock.core.parser import ParsedItem, SPACER_LOCATOR, parse_list_output
from ProDock.status import status
from tests.base import BaseTestCase, FOLDER_STACK_OPTIONS, HOME, LISTING

METACHARACTER_PATHS = (
    '/Applications/R&D.app',
    '/Applications/Foo(Beta).app',
    '/Users/alice/a;b',
    '/Users/alice/$HOME|x',
    '/Users/alice/<in>*`tick`',
    "/Users/alice/Bob's\\stuff",
)


class QuotePathTests(unittest.TestCase):

    def test_path_with_space_is_single_quoted(self):
        self.assertEqual(
            quote_path('/Applications/Visual Studio Code.app'),
            "'/Applications/Visual Studio Code.app'",
        )
        self.assertEqual(quote_path('~/My Docs'), "'~/My Docs'")

    def test_path_without_space_is_not_quoted(self):
        self.assertEqual(quote_path('/Applications/Safari.app'), '/Applications/Safari.app')
        self.assertEqual(quote_path('~/Downloads'), '~/Downloads')
        self.assertEqual(quote_path('~'), '~')

    def test_embedded_single_quotes_survive_the_shell(self):
        for path in ("/Applications/Bob's App.app", "/Applications/Bob's.app"):
            with self.subTest(path=path):
                self.assertEqual(shlex.split(quote_path(path)), [path])

    def test_metacharacters_are_escaped_without_quoting(self):
        self.assertEqual(quote_path('/Applications/R&D.app'), '/Applications/R\\&D.app')
        self.assertEqual(quote_path('~/a;b'), '~/a\\;b')
        for path in METACHARACTER_PATHS:
            with self.subTest(path=path):
                fragment = quote_path(path)
                self.assertFalse(fragment.startswith("'"))
                self.assertEqual(shlex.split(fragment), [path])


class OptionFlagTests(unittest.TestCase):

    def test_absent_options_add_nothing(self):
        self.assertEqual(option_flags(None), [])
        self.assertEqual(option_flags(''), [])

    def test_folder_options(self):
        self.assertEqual(
            option_flags(FOLDER_STACK_OPTIONS),
            ['--view grid', '--display stack', '--sort dateadded'],
        )

    def test_display_requires_folder_tile(self):
        options = '{ "file-type" = 41; "viewas" = 1; "showas" = 2; }'
        self.assertEqual(option_flags(options), ['--view list'])

    def test_each_sort_marker(self):
        expected = {1: 'name', 2: 'dateadded', 3: 'datemodified', 4: 'datecreated', 5: 'kind'}
        for value, name in expected.items():
            with self.subTest(arrangement=value):
                self.assertEqual(option_flags(f'{{ "arrangement" = {value}; }}'), [f'--sort {name}'])

    def test_unknown_values_add_nothing(self):
        self.assertEqual(option_flags('{ "arrangement" = 0; "showas" = 0; }'), [])

    def test_one_flag_per_category(self):
        options = '{ "showas" = 3; "showas" = 1; }'
        self.assertEqual(option_flags(options), ['--view grid'])


class BuildFragmentTests(unittest.TestCase):

    def test_app_path(self):
        item = ParsedItem('Safari', '/Applications/Safari.app')
        self.assertEqual(build_fragment(item), '/Applications/Safari.app')

    def test_folder_with_options(self):
        item = ParsedItem('Downloads', '~/Downloads', FOLDER_STACK_OPTIONS)
        self.assertEqual(
            build_fragment(item),
            '~/Downloads --view grid --display stack --sort dateadded',
        )

    def test_path_with_space_and_options(self):
        item = ParsedItem('Docs', '~/My Docs', '{ "file-type" = 2; "viewas" = 1; "showas" = 2; }')
        self.assertEqual(build_fragment(item), "'~/My Docs' --view list --display folder")

    def test_spacers(self):
        self.assertEqual(build_fragment(ParsedItem('', SPACER_LOCATOR)), "'' --type spacer")
        self.assertEqual(
            build_fragment(ParsedItem('Spacer', 'whatever', '{ "tile-type" = "small-spacer-tile"; }')),
            "'' --type small-spacer",
        )

    def test_stray_quotes_are_stripped(self):
        item = ParsedItem('Odd', '"/Applications/Odd.app\\\'')
        self.assertEqual(build_fragment(item), '/Applications/Odd.app')

    def test_empty_path_fails(self):
        with self.assertRaises(status.ConstructionFailedException):
            build_fragment(ParsedItem('Broken', '""'))

    def test_fragments_follow_parse_order(self):
        items = parse_list_output(LISTING, home=HOME)
        self.assertEqual(build_fragments(items), [
            '/Applications/Safari.app',
            '~/Downloads --view grid --display stack --sort dateadded',
        ])

    def test_fragment_is_equivalent_after_relisting(self):
        # Applying a fragment and listing again reports the same entry as a URL
        original = ParsedItem('Code', '/Applications/Visual Studio Code.app', FOLDER_STACK_OPTIONS)
        relisted = parse_list_output(
            f'Code\tfile:///Applications/Visual%20Studio%20Code.app/\tpersistentApps\t{FOLDER_STACK_OPTIONS}',
            home=HOME,
        )[0]
        self.assertEqual(build_fragment(relisted), build_fragment(original))


class FragmentReplayTests(BaseTestCase):
    """Fragments passed through /bin/sh reach dockutil as a single path argument."""

    def setUp(self) -> None:
        super().setUp()
        self.tools = self.use_fake_tools()
        self.service = DockutilService()

    def test_metacharacter_paths_reach_dockutil_intact(self):
        for path in METACHARACTER_PATHS:
            fragment = build_fragment(ParsedItem('Item', path))
            with self.subTest(path=path):
                self.service.add_item(fragment, no_restart=True)

        self.assertEqual(
            self.tools.calls(),
            [f'--add {path} --no-restart' for path in METACHARACTER_PATHS],
        )

    def test_metacharacter_path_is_the_add_argument(self):
        # The fake tool fails only when its second argument equals the whole path
        self.tools.fail_on('/Applications/R&D.app')
        with self.assertRaises(status.ExecutionFailedException):
            self.service.add_item(build_fragment(ParsedItem('R&D', '/Applications/R&D.app')))


if __name__ == '__main__':
    unittest.main()
