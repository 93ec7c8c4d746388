import unittest
from io import BytesIO
from urllib.parse import quote

from PIL import Image

from zpl_preview_web import create_app

HELLO = b"^XA^FO50,50^A0N,30,30^FDHELLO^FS^XZ"
TWO_LABELS = b"^XA^FO1,1^FDa^FS^XZ^XA^FO1,1^FDb^FS^XZ"
LABEL_URL = "/v1/printers/8dpmm/labels/2x1/0/"


def _image_size(data: bytes) -> tuple[int, int]:
    with Image.open(BytesIO(data)) as image:
        return image.size


class WebAppTests(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app()
        self.app.testing = True
        self.client = self.app.test_client()

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_data(as_text=True), "OK")

    def test_post_raw_body(self) -> None:
        response = self.client.post(LABEL_URL, data=HELLO)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "image/png")
        self.assertEqual(response.headers["X-Total-Count"], "1")
        self.assertEqual(_image_size(response.data), (406, 203))

    def test_post_multipart_file(self) -> None:
        response = self.client.post(
            LABEL_URL,
            data={"file": (BytesIO(HELLO), "label.zpl")},
            content_type="multipart/form-data",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "image/png")

    def test_multipart_without_file_field(self) -> None:
        response = self.client.post(
            LABEL_URL,
            data={"other": (BytesIO(HELLO), "label.zpl")},
            content_type="multipart/form-data",
        )
        self.assertEqual(response.status_code, 400)

    def test_get_with_zpl_in_path(self) -> None:
        response = self.client.get(LABEL_URL + quote(HELLO.decode()))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "image/png")

    def test_get_with_zpl_in_query_string(self) -> None:
        response = self.client.get(LABEL_URL + "?" + quote(HELLO.decode()))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-Total-Count"], "1")

    def test_density_without_suffix_and_fractional_size(self) -> None:
        response = self.client.post("/v1/printers/12/labels/1.5x0.5/0/", data=HELLO)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(_image_size(response.data), (457, 152))

    def test_total_count_and_index(self) -> None:
        response = self.client.post("/v1/printers/8dpmm/labels/2x1/1/", data=TWO_LABELS)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-Total-Count"], "2")

    def test_index_out_of_range(self) -> None:
        response = self.client.post("/v1/printers/8dpmm/labels/2x1/5/", data=TWO_LABELS)
        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid index 5. Found 2 labels", response.get_data(as_text=True))

    def test_rotation_header(self) -> None:
        response = self.client.post(LABEL_URL, data=HELLO, headers={"X-Rotation": "90"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(_image_size(response.data), (203, 406))

    def test_invalid_rotation_header(self) -> None:
        response = self.client.post(LABEL_URL, data=HELLO, headers={"X-Rotation": "45"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("X-Rotation", response.get_data(as_text=True))

    def test_invalid_path_parameters(self) -> None:
        for url in (
            "/v1/printers/abc/labels/2x1/0/",
            "/v1/printers/0dpmm/labels/2x1/0/",
            "/v1/printers/8dpmm/labels/2by1/0/",
            "/v1/printers/8dpmm/labels/0x1/0/",
            "/v1/printers/8dpmm/labels/2x1/first/",
        ):
            with self.subTest(url=url):
                response = self.client.post(url, data=HELLO)
                self.assertEqual(response.status_code, 400)

    def test_empty_body(self) -> None:
        response = self.client.post(LABEL_URL, data=b"")
        self.assertEqual(response.status_code, 400)
        self.assertIn("No ZPL data", response.get_data(as_text=True))

    def test_no_labels(self) -> None:
        response = self.client.post(LABEL_URL, data=b"^FO1,1^FDx^FS")
        self.assertEqual(response.status_code, 400)
        self.assertIn("No labels found", response.get_data(as_text=True))

    def test_parse_error(self) -> None:
        response = self.client.post(LABEL_URL, data=b"^XA^FOabc,1^FDx^FS^XZ")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Failed to parse ZPL", response.get_data(as_text=True))

    def test_method_not_allowed(self) -> None:
        response = self.client.put(LABEL_URL, data=HELLO)
        self.assertEqual(response.status_code, 405)

    def test_body_size_limit(self) -> None:
        client = create_app(max_content_length=16).test_client()
        response = client.post(LABEL_URL, data=HELLO)
        self.assertEqual(response.status_code, 413)


if __name__ == "__main__":
    unittest.main()
