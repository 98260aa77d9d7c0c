from inquiry_admin.browser.debounce import DebouncedSearch
from inquiry_admin.browser.detail import InquiryDetail, format_date, reply_mailto, status_tone
from inquiry_admin.browser.inquiry_browser import InquiryBrowser
from inquiry_admin.browser.state import BrowserState, reduce
