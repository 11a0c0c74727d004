"""User-facing response messages, shared by services and routes."""

SUCCESS = "Success"

# Registration / OTP
OTP_SENT = "OTP sent to email successfully"
INVALID_OTP = "Invalid OTP"
OTP_EXPIRED = "OTP has expired"
EMAIL_NOT_FOUND = "Email not found"
EMAIL_VERIFIED = "Email verified successfully"
EMAIL_ALREADY_VERIFIED = "Email is already verified"
EMAIL_NOT_VERIFIED = "Email not verified"
EMAIL_ALREADY_EXISTS = "Email already exists"
MAX_OTP_RESENDS_REACHED = "Maximum OTP resend attempts reached"
MAX_OTP_ATTEMPTS_REACHED = "Too many invalid attempts, request a new code"
OTP_DELIVERY_FAILED = "Failed to send OTP email"
USERNAME_TAKEN = "Username already taken"
USERNAME_AVAILABLE = "Username is available"
USER_REGISTERED = "User registered successfully"

# Sessions
INVALID_CREDENTIALS = "Invalid credentials"
LOGIN_SUCCESS = "Login successful"
LOGOUT_SUCCESS = "Logout successful"
ACCESS_TOKEN_REQUIRED = "Access token required"
EXPIRED_TOKEN = "Invalid or expired token"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
TOKEN_REFRESHED = "Token refreshed successfully"
TOKEN_USER_MISMATCH = "Refresh token does not belong to this session"
ADMIN_ACCESS_REQUIRED = "Admin access required"
ACCOUNT_INACTIVE = "Account is inactive"
SOCIAL_SIGN_IN_FAILED = "Unable to verify identity token"
PASSWORD_RESET_EMAIL_SENT = "Password reset email sent"
PASSWORD_RESET_SUCCESS = "Password reset successful"

# Users
USER_NOT_FOUND = "User not found"
USER_DELETED = "User deleted successfully"
CANNOT_DELETE_ADMIN = "Admin accounts cannot be deleted"
CANNOT_TARGET_SELF = "You cannot perform this action on yourself"
PROFILE_UPDATED = "Profile updated successfully"

# Posts / votes
POST_NOT_FOUND = "Post not found"
POSTS_NOT_FOUND = "No posts found"
OPTION_NOT_FOUND = "Option not found"
INVALID_OPTIONS_FORMAT = "Invalid options format"
SEARCH_QUERY_TOO_SHORT = "Search query must be at least 3 characters long"
NO_UPDATES_PROVIDED = "No updates provided"
NO_TRENDING_POSTS = "No trending posts found."
VOTE_NOT_FOUND = "Vote not found"
ALREADY_VOTED = "You have already voted on this post"

# Comments
COMMENT_NOT_FOUND = "Comment not found"
PARENT_COMMENT_NOT_FOUND = "Parent comment not found"
INVALID_REACTION_TYPE = "Type must be 'likes' or 'dislikes'"
REACTION_CONFLICT = "Comment changed while reacting, please retry"

UNAUTHORISED_ACCESS = "Unauthorised access"

# Uploads
FILE_TOO_LARGE = "File exceeds the maximum allowed size"
INVALID_FILE_TYPE = "Invalid file type. Only JPEG and PNG are allowed"
STORAGE_NOT_CONFIGURED = "File storage is not configured"

# Misc
SUBSCRIPTION_SUCCESS = "Subscribed successfully"
ALREADY_SUBSCRIBED = "Email is already subscribed"
