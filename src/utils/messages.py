from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired after a successful login or registration.
    The app copies the new user into its reactive so the sidebar refreshes.
    """

    bubble = True


class NewOrderMessage(Message):
    """
    Fired when an order was created remotely and handed off to WhatsApp.
    Handled at app level: notify and go back to the catalogue.
    """

    bubble = True

    def __init__(self, order_number: str, link_opened: bool = True) -> None:
        super().__init__()
        self.order_number = order_number
        self.link_opened = link_opened


class SessionExpiredMessage(Message):
    """
    Posted when an account call finds the stored login gone.
    The app drops the user, as for a logout, but without asking.
    """

    bubble = True
