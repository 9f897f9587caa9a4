"""
Tracking snippet rendering for Expressions Analytics.

The templates below are vendor markup. Tracking vendors and consuming pages
rely on their exact shape, so they are only ever filled in, never rebuilt.
"""

import json
import logging
from typing import Any, List, Mapping, Optional, Union

from config import Settings
from models import AnalyticsSettings, TrackingAccount, TrackingAccounts

logger = logging.getLogger(__name__)


# Piwik tracking code.
# - track_domain = The top domain to track.
# - rest_api = The REST API base for the Piwik tracker, minus the protocol.
# - site_id = The unique site id.
TRACKING_CODE_PIWIK = """<!-- Piwik -->
<script type="text/javascript">
var _paq=_paq||[];
_paq.push(["setDocumentTitle",document.domain+"/"+document.title]);
_paq.push(["setCookieDomain","%(track_domain)s"]);
_paq.push(["setDomains",["%(track_domain)s"]]);
_paq.push(["trackPageView"]);
_paq.push(["enableLinkTracking"]);
(function(d,t,u,g,s) {
u=("https:"==d.location.protocol?"https":"http")+"://%(rest_api)s/";
_paq.push(["setTrackerUrl",u+"piwik.php"]);
_paq.push(["setSiteId",%(site_id)d]);
g=d.createElement(t);
s=d.getElementsByTagName(t)[0];
g.type="text/javascript";
g.defer=true;
g.async=true;
g.src=u+"piwik.js";
s.parentNode.insertBefore(g,s);
})(document,"script");
</script>
<noscript><img src="//%(rest_api)s/piwik.php?idsite=%(site_id)d&rec=1" style="border:0" alt="" /></noscript>
<!-- End Piwik Code -->
"""

# Google tracking code.
# - api_calls = The _gaq.push() statements.
TRACKING_CODE_GOOGLE = """<script type="text/javascript">
var _gaq=_gaq||[];
%(api_calls)s(function() {
var ga=document.createElement('script');
ga.type='text/javascript';
ga.async=true;
ga.src=('https:'==document.location.protocol?'https://ssl':'http://www')+'.google-analytics.com/ga.js';
var s=document.getElementsByTagName('script')[0];
s.parentNode.insertBefore(ga,s);
})();
</script>
"""

# Google tracking API call.
# - call = The API call arguments as a JSON array.
TRACKING_CODE_GOOGLE_API_CALL = """_gaq.push(%(call)s);
"""

AccountSpec = Union[TrackingAccount, Mapping[str, Any], None]


def render_piwik(track_domain: str, rest_api: str, site_id: int) -> str:
    """
    Generate the Piwik tracking code.

    Args:
        track_domain: The cookie and link domain to track
        rest_api: The REST API host, minus the protocol
        site_id: The unique site id assigned by Piwik

    Returns:
        The Piwik tracking code
    """
    if site_id < 0:
        raise ValueError(f"Piwik site id must be non-negative, got {site_id}")
    return TRACKING_CODE_PIWIK % {
        "track_domain": track_domain,
        "rest_api": rest_api,
        "site_id": site_id,
    }


def google_api_call(call: List[str]) -> str:
    """Generate one _gaq.push() statement for the given call."""
    return TRACKING_CODE_GOOGLE_API_CALL % {
        "call": json.dumps(call, separators=(",", ":")),
    }


def _namespace_prefix(tracking: AccountSpec) -> str:
    if isinstance(tracking, TrackingAccount):
        namespace = tracking.namespace
    elif isinstance(tracking, Mapping):
        namespace = tracking.get("namespace")
    else:
        namespace = None
    if isinstance(namespace, str) and namespace:
        return namespace + "."
    return ""


def render_google(accounts: Mapping[str, AccountSpec]) -> str:
    """
    Generate the Google tracking code.

    Each account gets a _setAccount and a _trackPageview call, in mapping
    order. No script is emitted at all when there are no accounts.

    Args:
        accounts: Account id mapped to its tracking options (namespace)

    Returns:
        The Google tracking code, or an empty string
    """
    api_calls = ""
    for account, tracking in accounts.items():
        ns = _namespace_prefix(tracking)
        api_calls += google_api_call([ns + "_setAccount", account])
        api_calls += google_api_call([ns + "_trackPageview"])

    if not api_calls:
        return ""
    return TRACKING_CODE_GOOGLE % {"api_calls": api_calls}


def google_accounts(config: Settings, stored: AnalyticsSettings) -> TrackingAccounts:
    """
    Collect the Google accounts to track: the global one first, then the
    site's own web property. A repeated account id keeps its first entry.
    """
    accounts = {}
    if config.google_global_tracking_enabled:
        accounts[config.GOOGLE_GLOBAL_TRACKING_ID] = TrackingAccount(
            namespace=config.GOOGLE_GLOBAL_TRACKING_NAMESPACE
        )

    property_id = stored.google_web_property_id.strip()
    if property_id and property_id not in accounts:
        accounts[property_id] = TrackingAccount(namespace="")

    return accounts


def site_piwik_id(config: Settings, stored: AnalyticsSettings) -> Optional[int]:
    """The stored Piwik site id, when it can be tracked alongside the global one."""
    if stored.piwik_site_id is None or config.PIWIK_GLOBAL_TRACKING_REST_API is None:
        return None
    if stored.piwik_site_id == config.PIWIK_GLOBAL_TRACKING_ID:
        return None
    return stored.piwik_site_id


def render_tracking_code(config: Settings, stored: AnalyticsSettings) -> str:
    """
    Build all the tracking code for the page footer.

    Providers whose configuration is absent or invalid are skipped silently.
    """
    output = ""

    if config.piwik_global_tracking_enabled:
        output += render_piwik(
            config.PIWIK_GLOBAL_TRACKING_DOMAIN,
            config.PIWIK_GLOBAL_TRACKING_REST_API,
            config.PIWIK_GLOBAL_TRACKING_ID,
        )

    site_id = site_piwik_id(config, stored)
    if site_id is not None and config.site_domain:
        output += render_piwik(
            config.site_domain,
            config.PIWIK_GLOBAL_TRACKING_REST_API,
            site_id,
        )

    output += render_google(google_accounts(config, stored))

    logger.debug(f"Rendered {len(output)} characters of tracking code")
    return output
