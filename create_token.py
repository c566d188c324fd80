"""Print a bearer token for the user id given on the command line (default 1)."""
import sys

from car_rental_api.app.core.security import create_access_token

user_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1
# срок действия токена: 365 дней (секунды)
token = create_access_token({"sub": str(user_id), "user_id": user_id}, expires_delta=365*24*60*60)
print(token)
