"""Store URLs for products and images."""

import html


class LinkBuilder:
    """Builds absolute store links.

    Example usage:
        links = LinkBuilder("http://shop.example/catalog/")
        links.product_url(42, "EUR")
        # "http://shop.example/catalog/product_info.php?currency=EUR&products_id=42"
    """

    def __init__(
        self,
        store_url: str,
        product_page: str = "product_info.php",
        images_dir: str = "images/",
    ) -> None:
        """Initialize link builder.

        Args:
            store_url: Base URL of the store front.
            product_page: Page showing a single product.
            images_dir: Directory of product images, relative to the store.
        """
        self.store_url = store_url if store_url.endswith("/") else store_url + "/"
        self.product_page = product_page.lstrip("/")
        images_dir = images_dir.strip("/")
        self.images_dir = images_dir + "/" if images_dir else ""

    def product_url(self, product_id: int, currency: str) -> str:
        """Get the product page URL.

        Args:
            product_id: Product ID.
            currency: Currency the page should show prices in.

        Returns:
            Absolute URL.
        """
        return html.unescape(
            f"{self.store_url}{self.product_page}?currency={currency}&products_id={product_id}"
        )

    def image_url(self, image_path: str | None) -> str:
        """Get the absolute image URL.

        Args:
            image_path: Image path relative to the images directory.

        Returns:
            Absolute URL, or an empty string when the product has no image.
        """
        if not image_path or not image_path.strip():
            return ""
        return html.unescape(f"{self.store_url}{self.images_dir}{image_path.strip().lstrip('/')}")
