import socket
from unittest.mock import patch

from repl_inspector.cluster.resolver import ChainResolver, DnsResolver, StaticTableResolver, default_resolver


def test_dns_answer_wins_and_trailing_dot_is_removed():
    with patch("repl_inspector.cluster.resolver.socket.gethostbyaddr",
               return_value=("db1.example.com.", [], ["10.0.0.1"])):
        assert DnsResolver().resolve("10.0.0.1") == "db1.example.com"


def test_dns_failure_returns_none():
    with patch("repl_inspector.cluster.resolver.socket.gethostbyaddr", side_effect=socket.herror(1, "not found")):
        assert DnsResolver().resolve("10.0.0.1") is None


def test_static_table_lookup():
    resolver = StaticTableResolver({"192.168.1.101": "myhost1.testmachine.com"})
    assert resolver.resolve("192.168.1.101") == "myhost1.testmachine.com"
    assert resolver.resolve("192.168.1.200") is None


def test_chain_falls_back_to_static_table_then_raw_address():
    with patch("repl_inspector.cluster.resolver.socket.gethostbyaddr", side_effect=socket.herror(1, "not found")):
        resolver = default_resolver({"192.168.1.102": "myhost2.testmachine.com"})
        assert resolver.resolve("192.168.1.102") == "myhost2.testmachine.com"
        assert resolver.resolve("172.16.0.9") == "172.16.0.9"


def test_chain_stops_at_first_answer():
    first = StaticTableResolver({"10.0.0.1": "first"})
    second = StaticTableResolver({"10.0.0.1": "second"})
    assert ChainResolver([first, second]).resolve("10.0.0.1") == "first"
