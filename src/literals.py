WELCOME_STRING = ("Welcome to BORGA! I keep track of your board game collections.\n\n"
                  "/newgroup name | description - create a group\n"
                  "/groups - list your groups\n"
                  "/group id - show a group and its games\n"
                  "/rename id new name - rename a group\n"
                  "/deletegroup id - delete a group\n"
                  "/addgame group_id game_id - add a game from Board Game Atlas\n"
                  "/removegame group_id game_id - remove a game from a group")

NOT_REGISTERED_STRING = "Send /start to register before using this command"
PRIVATE_CHAT_ONLY_STRING = "Talk to me in a private chat to manage your board game groups"
INVALID_GROUP_ID_STRING = "Group ids are numbers, see /groups for yours"

NEW_GROUP_USAGE = "Usage: /newgroup name | optional description"
GROUP_USAGE = "Usage: /group id"
RENAME_USAGE = "Usage: /rename id new name"
DELETE_GROUP_USAGE = "Usage: /deletegroup id"
ADD_GAME_USAGE = "Usage: /addgame group_id game_id"
REMOVE_GAME_USAGE = "Usage: /removegame group_id game_id"
