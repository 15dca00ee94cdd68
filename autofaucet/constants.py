"""AutoFaucet URLs, CSS selectors, log format and provider endpoints."""

# ── URLs ─────────────────────────────────────────────────────────────────────

AUTOFAUCET_BASE = "https://autofaucet.org"
AUTOFAUCET_DASHBOARD_URL = f"{AUTOFAUCET_BASE}/dashboard"

# ── CSS Selectors ────────────────────────────────────────────────────────────

SELECTORS = {
    # Login form
    "login_username": "input[name=username]",
    "login_password": "input[name=password]",
    "login_submit": "button[type=submit]",

    # reCAPTCHA widgets
    "recaptcha_widget": "[data-sitekey]",
    "recaptcha_iframe": "iframe[src*='recaptcha']",
    "recaptcha_response": "textarea[name='g-recaptcha-response']",
}

# ── Logging ──────────────────────────────────────────────────────────────────

LOG_FORMAT = "[BrowsingSession-{0}] [{1}] [{2}] {3}"
LOG_TIME_FORMAT = "%H:%M:%S"

LOG_LEVEL_TAGS = {
    "DEBUG": "DEBUG",
    "INFO": "LOG",
    "WARNING": "WARN",
    "ERROR": "ERROR",
    "CRITICAL": "ERROR",
}

# ── Captcha Providers ────────────────────────────────────────────────────────

CAPMONSTER_API_URL = "https://api.capmonster.cloud"
CAPMONSTER_RECAPTCHA_TASK = "RecaptchaV2TaskProxyless"
CAPMONSTER_INVISIBLE_TASK = "NoCaptchaTaskProxyless"

# ── Page Scripts ─────────────────────────────────────────────────────────────

# Collect every reCAPTCHA v2 widget on the page as {id, sitekey, invisible}.
FIND_RECAPTCHAS_JS = """
() => {
    const found = new Map();
    document.querySelectorAll("[data-sitekey]").forEach((el, index) => {
        const id = el.id || `recaptcha-${index}`;
        found.set(el.getAttribute("data-sitekey"), {
            id: id,
            sitekey: el.getAttribute("data-sitekey"),
            invisible: el.getAttribute("data-size") === "invisible",
        });
    });
    document.querySelectorAll("iframe[src*='recaptcha']").forEach((frame, index) => {
        const params = new URL(frame.src).searchParams;
        const sitekey = params.get("k");
        if (!sitekey || found.has(sitekey)) return;
        found.set(sitekey, {
            id: `recaptcha-frame-${index}`,
            sitekey: sitekey,
            invisible: params.get("size") === "invisible",
        });
    });
    return Array.from(found.values());
}
"""

HIGHLIGHT_RECAPTCHAS_JS = """
(color) => {
    document.querySelectorAll("[data-sitekey], iframe[src*='recaptcha']").forEach((el) => {
        el.style.outline = `3px solid ${color}`;
        el.style.outlineOffset = "2px";
    });
}
"""

# Write the token into every response textarea and fire the widget callback.
INJECT_RECAPTCHA_TOKEN_JS = """
({sitekey, token}) => {
    document.querySelectorAll("textarea[name='g-recaptcha-response']").forEach((area) => {
        area.innerHTML = token;
        area.value = token;
    });
    const widget = document.querySelector(`[data-sitekey="${sitekey}"]`);
    const callbackName = widget && widget.getAttribute("data-callback");
    if (callbackName && typeof window[callbackName] === "function") {
        window[callbackName](token);
        return true;
    }
    return false;
}
"""

HIGHLIGHT_DETECTED_COLOR = "#d1c13b"
HIGHLIGHT_SOLVED_COLOR = "#3bd15a"
