from bs4 import BeautifulSoup
from urllib.parse import urljoin


class HTMLParser:
    def __init__(self, base_url):
        self.base_url = base_url

    def extract_links(self, html_content):
        """Return the href of every anchor, resolved against the document base

        Links come back in document order and unfiltered, the same way a
        browser reports anchor.href. The first <base href> overrides the page
        URL as resolution base. Anchors without an href are skipped.
        """
        soup = BeautifulSoup(html_content, 'html.parser')
        base_url = self._document_base(soup)

        links = []
        for anchor in soup.find_all('a', href=True):
            href = anchor['href'].strip()
            try:
                links.append(urljoin(base_url, href))
            except ValueError:
                # Malformed hrefs such as "http://[" are kept verbatim
                links.append(href)

        return links

    def _document_base(self, soup):
        base = soup.find('base', href=True)
        if base is None or not base['href'].strip():
            return self.base_url
        try:
            return urljoin(self.base_url, base['href'].strip())
        except ValueError:
            return self.base_url
