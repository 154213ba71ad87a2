from tabsort.tab_policy.hostnames import EffectiveHosts, is_ip_or_localhost, resolve


def test_resolve_collapses_subdomains_to_registrable_domain():
    assert resolve("https://mail.google.com") == "google.com"
    assert resolve("https://docs.google.com") == "google.com"
    assert resolve("https://www.google.com") == "google.com"


def test_resolve_keeps_three_labels_under_multi_part_suffix():
    assert resolve("https://www.bbc.co.uk") == "bbc.co.uk"
    assert resolve("https://news.bbc.co.uk/sport") == "bbc.co.uk"
    assert resolve("https://shop.example.com.au") == "example.com.au"


def test_resolve_leaves_ip_and_localhost_untouched():
    assert resolve("http://192.168.1.1:8080/x") == "192.168.1.1"
    assert resolve("http://localhost:3000/admin") == "localhost"


def test_resolve_falls_back_to_lowercased_raw_value():
    assert resolve("not a url") == "not a url"
    assert resolve("Example.COM/Path") == "example.com/path"
    assert resolve("") == ""
    assert resolve(None) == ""


def test_resolve_single_label_host_and_case():
    assert resolve("chrome://extensions/") == "extensions"
    assert resolve("HTTPS://WWW.GitHub.COM/openai") == "github.com"


def test_resolve_is_deterministic():
    urls = ["https://a.b.example.org/x", "http://[bad", "https://www.bbc.co.uk"]
    assert [resolve(u) for u in urls] == [resolve(u) for u in urls]


def test_resolve_honors_suffix_and_www_overrides():
    assert resolve("https://www.example.co.nz", suffixes=("co.nz",)) == "example.co.nz"
    assert resolve("https://www", strip_www=False) == "www"
    assert resolve("https://www.example.co.uk", suffixes=()) == "co.uk"


def test_is_ip_or_localhost_variants():
    assert is_ip_or_localhost("10.0.0.5")
    assert is_ip_or_localhost("LOCALHOST")
    assert not is_ip_or_localhost("example.com")
    assert not is_ip_or_localhost("1.2.3")


def test_effective_hosts_memoizes_and_uses_cfg():
    hosts = EffectiveHosts.from_cfg({"multiPartSuffixes": ["co.nz"], "stripWww": True})

    assert hosts("https://www.shop.example.co.nz") == "example.co.nz"
    assert hosts("https://www.shop.example.co.nz") == "example.co.nz"
    assert len(hosts._cache) == 1
