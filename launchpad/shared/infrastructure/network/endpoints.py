"""Remote API endpoint paths, relative to ``ApiConfig.base_url``."""

from urllib.parse import quote


class Endpoints:
    BASE = "https://crud.teamrabbil.com/api/v1"

    # Authentication
    REGISTER = "/auth/register/"
    LOGIN = "/auth/login"
    FORGOT_PASSWORD = "/auth/forgot_password/"
    RESET_PASSWORD = "/auth/reset_password/"
    REFRESH_TOKEN = "/auth/refresh_token/"

    # OTP
    VERIFY_OTP = "/otp/verify_otp/"
    RESEND_OTP = "/otp/resend_otp/"

    # Products
    GET_PRODUCT = "/ReadProduct"
    CREATE_PRODUCT = "/CreateProduct"

    @staticmethod
    def update_product(product_id: str) -> str:
        return f"/UpdateProduct/{quote(product_id, safe='')}"

    @staticmethod
    def delete_product(product_id: str) -> str:
        return f"/DeleteProduct/{quote(product_id, safe='')}"
