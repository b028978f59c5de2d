from unittest import TestCase

from clusterops.exceptions import InvalidArgumentError
from clusterops.op_definition import create_op_definition, sanitize_id
from clusterops.types import Action


class TestOpDefinition(TestCase):
    def test_create(self):
        op = create_op_definition('myrsc', 'monitor', '10s', '20s')
        self.assertEqual(op.id, 'myrsc-monitor-10s')
        self.assertDictEqual(op.to_attrs(), {'id': 'myrsc-monitor-10s', 'interval': '10s', 'name': 'monitor', 'timeout': '20s'})

    def test_create_without_timeout(self):
        op = create_op_definition('myrsc', Action.START, '0')
        self.assertDictEqual(op.to_attrs(), {'id': 'myrsc-start-0', 'interval': '0', 'name': 'start'})

    def test_id_sanitized(self):
        self.assertEqual(create_op_definition('grp:rsc#1', 'stop', '0').id, 'grp.rsc.1-stop-0')
        self.assertEqual(sanitize_id('a:b'), 'a.b')

    def test_missing_fields(self):
        for args in [(None, 'start', '0'), ('myrsc', None, '0'), ('myrsc', 'start', None), ('', 'start', '0')]:
            with self.subTest(args=args):
                with self.assertRaises(InvalidArgumentError):
                    create_op_definition(*args)
